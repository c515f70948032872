"""Data types and dataclasses for omnibridge-deploy."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class CompiledArtifact:
    """A compiled contract as emitted by the build (Truffle artifact format)."""

    contract_name: str
    abi: List[Dict[str, Any]] = field(repr=False)
    bytecode: str = field(repr=False)
    source_path: str
    compiler_version: str
    metadata: Optional[str] = field(default=None, repr=False)  # solc metadata JSON string


@dataclass(frozen=True)
class DeploymentStep:
    """One contract-creation transaction, fixed once its nonce is assigned."""

    network: str
    nonce: int
    artifact: CompiledArtifact
    constructor_args: Tuple[Any, ...]


@dataclass(frozen=True)
class DeployedContract:
    """A contract that has been mined on a network."""

    address: str
    network: str
    contract_name: str = ""
    constructor_arguments: str = ""  # ABI-encoded hex, no 0x prefix


@dataclass(frozen=True)
class DeploymentResult:
    """Addresses produced by a complete deployment run."""

    mediator_address: str
    token_factory_address: str
    gas_limit_manager_address: str
    helper_router_address: Optional[str] = None

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        result = {
            "foreignBridgeMediator": {"address": self.mediator_address},
            "tokenFactory": {"address": self.token_factory_address},
            "gasLimitManager": {"address": self.gas_limit_manager_address},
        }
        if self.helper_router_address is not None:
            result["wethOmnibridgeRouter"] = {"address": self.helper_router_address}
        return result


# Token infrastructure sources, resolved once per run from configuration


@dataclass(frozen=True)
class PreconfiguredImage:
    address: str


@dataclass(frozen=True)
class ImageToDeploy:
    pass


TokenImageSource = Union[PreconfiguredImage, ImageToDeploy]


@dataclass(frozen=True)
class PreconfiguredFactory:
    address: str


@dataclass(frozen=True)
class FactoryToDeploy:
    image: TokenImageSource


TokenFactorySource = Union[PreconfiguredFactory, FactoryToDeploy]


class ExplorerDialect(Enum):
    """
    Block explorer API flavours.

    Both accept the same verification intent but use different field names
    and action values on the wire.
    """

    ETHERSCAN = "etherscan"
    BLOCKSCOUT = "blockscout"


class VerificationOutcome(Enum):
    """How an explorer answered a single verification submission."""

    VERIFIED = "verified"
    NOT_INDEXED = "not-indexed"  # explorer has not seen the bytecode yet
    REJECTED = "rejected"


@dataclass(frozen=True)
class VerificationRequest:
    """Everything needed to verify one deployed contract."""

    artifact: CompiledArtifact
    address: str
    constructor_arguments: str
    api_url: Optional[str]
    api_key: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class VerificationParams:
    """Dialect-neutral verification parameters derived from a request."""

    address: str
    contract_name: str
    constructor_arguments: str
    compiler: str  # e.g. "v0.7.5+commit.eb77ed08"
    optimization_used: bool
    runs: int
    evm_version: str
    api_url: Optional[str]
    api_key: Optional[str] = field(default=None, repr=False)
