"""
omnibridge-deploy: deploy the foreign side of an Omnibridge mediator and verify it on a block explorer
"""

from importlib.metadata import PackageNotFoundError, version

from .artifacts import load_artifact, load_artifacts
from .chain import ChainClient, TransactionReceipt, Web3ChainClient
from .config import BridgeConfig, load_config
from .deployer import ContractDeployer
from .exceptions import (
    ArtifactMetadataError,
    ArtifactNotFoundError,
    ChainClientError,
    ConfigurationError,
    ContractDeploymentError,
    DeploymentError,
    FlattenedSourceNotFoundError,
    NonceFetchError,
    ProxyUpgradeError,
    TransactionFailedError,
    VerificationError,
)
from .planner import DeploymentPlanner, PlannerState
from .sequencer import NonceSequencer
from .types import (
    CompiledArtifact,
    DeployedContract,
    DeploymentResult,
    ExplorerDialect,
)
from .verifier import select_dialect, verify, verify_deployment

try:
    __version__ = version("omnibridge-deploy")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "BridgeConfig",
    "load_config",
    "load_artifact",
    "load_artifacts",
    "ChainClient",
    "TransactionReceipt",
    "Web3ChainClient",
    "NonceSequencer",
    "ContractDeployer",
    "DeploymentPlanner",
    "PlannerState",
    "select_dialect",
    "verify",
    "verify_deployment",
    "CompiledArtifact",
    "DeployedContract",
    "DeploymentResult",
    "ExplorerDialect",
    "DeploymentError",
    "ConfigurationError",
    "ArtifactNotFoundError",
    "ChainClientError",
    "TransactionFailedError",
    "NonceFetchError",
    "ContractDeploymentError",
    "ProxyUpgradeError",
    "VerificationError",
    "FlattenedSourceNotFoundError",
    "ArtifactMetadataError",
]
