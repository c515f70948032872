"""Environment-driven configuration for omnibridge-deploy."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from web3 import Web3

from .constants import DEFAULT_GAS_LIMIT_EXTRA, DEFAULT_GAS_PRICE_GWEI, DEFAULT_TX_TIMEOUT
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class BridgeConfig:
    """Validated settings for one foreign-side deployment run."""

    # Connection
    rpc_url: str
    private_key: str = field(repr=False)

    # Mediator parameters
    bridge_owner: str
    amb_bridge: str
    mediator_request_gas_limit: int
    token_name_suffix: str = ""

    # Reuse of shared infrastructure
    token_factory: Optional[str] = None
    token_image: Optional[str] = None
    weth_address: Optional[str] = None

    # Verification
    explorer_url: Optional[str] = None
    explorer_api_key: Optional[str] = field(default=None, repr=False)

    # Transactions
    gas_price_gwei: float = DEFAULT_GAS_PRICE_GWEI
    gas_limit_extra: float = DEFAULT_GAS_LIMIT_EXTRA
    tx_timeout: float = DEFAULT_TX_TIMEOUT


def _optional(environ: Mapping[str, str], name: str) -> Optional[str]:
    # Empty values mean "not configured"
    value = environ.get(name, "").strip()
    return value or None


def _required(environ: Mapping[str, str], name: str) -> str:
    value = _optional(environ, name)
    if value is None:
        raise ConfigurationError(f"Environment variable {name} is required")
    return value


def _address(environ: Mapping[str, str], name: str, required: bool = False) -> Optional[str]:
    value = _required(environ, name) if required else _optional(environ, name)
    if value is not None and not Web3.is_address(value):
        raise ConfigurationError(f"{name} is not a valid address: {value!r}")
    return value


def _number(environ: Mapping[str, str], name: str, default, cast):
    value = _optional(environ, name)
    if value is None:
        return default
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def load_config(environ: Optional[Mapping[str, str]] = None) -> BridgeConfig:
    """
    Build a BridgeConfig from environment variables.

    Args:
        environ: Variable mapping (defaults to os.environ)

    Returns:
        Validated BridgeConfig

    Raises:
        ConfigurationError: If a required variable is missing or a value is malformed
    """
    if environ is None:
        environ = os.environ

    gas_limit = _number(environ, "FOREIGN_MEDIATOR_REQUEST_GAS_LIMIT", None, int)
    if gas_limit is None:
        raise ConfigurationError("Environment variable FOREIGN_MEDIATOR_REQUEST_GAS_LIMIT is required")

    return BridgeConfig(
        rpc_url=_required(environ, "FOREIGN_RPC_URL"),
        private_key=_required(environ, "DEPLOYMENT_ACCOUNT_PRIVATE_KEY"),
        bridge_owner=_address(environ, "FOREIGN_BRIDGE_OWNER", required=True),
        amb_bridge=_address(environ, "FOREIGN_AMB_BRIDGE", required=True),
        mediator_request_gas_limit=gas_limit,
        token_name_suffix=environ.get("FOREIGN_TOKEN_NAME_SUFFIX", ""),
        token_factory=_address(environ, "FOREIGN_TOKEN_FACTORY"),
        token_image=_address(environ, "FOREIGN_ERC677_TOKEN_IMAGE"),
        weth_address=_address(environ, "FOREIGN_WETH_ADDRESS"),
        explorer_url=_optional(environ, "FOREIGN_EXPLORER_URL"),
        explorer_api_key=_optional(environ, "FOREIGN_EXPLORER_API_KEY"),
        gas_price_gwei=_number(environ, "FOREIGN_GAS_PRICE", DEFAULT_GAS_PRICE_GWEI, float),
        gas_limit_extra=_number(environ, "DEPLOYMENT_GAS_LIMIT_EXTRA", DEFAULT_GAS_LIMIT_EXTRA, float),
        tx_timeout=_number(environ, "FOREIGN_TX_TIMEOUT", DEFAULT_TX_TIMEOUT, float),
    )
