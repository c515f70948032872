"""Custom exception classes for omnibridge-deploy."""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when a required setting is missing or malformed."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a compiled contract artifact is not found."""

    pass


class ChainClientError(DeploymentError, RuntimeError):
    """Raised when an RPC call to the network fails."""

    pass


class TransactionFailedError(ChainClientError):
    """Raised when a transaction is rejected, reverted or not mined in time."""

    pass


class NonceFetchError(DeploymentError, RuntimeError):
    """Raised when the starting nonce of the deployment account cannot be fetched."""

    pass


class ContractDeploymentError(DeploymentError, RuntimeError):
    """Raised when a deployment step fails; the run must be restarted."""

    def __init__(self, message: str, contract_name: str = "", nonce: int = -1):
        super().__init__(message)
        self.contract_name = contract_name
        self.nonce = nonce


class ProxyUpgradeError(ContractDeploymentError):
    """Raised when linking the proxy to its implementation fails."""

    pass


class VerificationError(DeploymentError):
    """Base exception for verification problems that retrying cannot fix."""

    pass


class FlattenedSourceNotFoundError(VerificationError, FileNotFoundError):
    """Raised when the flattened source file for a contract is missing."""

    pass


class ArtifactMetadataError(VerificationError, ValueError):
    """Raised when compiler settings cannot be read from artifact metadata."""

    pass
