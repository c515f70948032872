"""Configuration constants for omnibridge-deploy."""

# Contract names as they appear in compiled artifacts (build/contracts/<name>.json)
ETERNAL_STORAGE_PROXY = "EternalStorageProxy"
PERMITTABLE_TOKEN = "PermittableToken"
TOKEN_FACTORY = "TokenFactory"
GAS_LIMIT_MANAGER = "SelectorTokenGasLimitManager"
FOREIGN_OMNIBRIDGE = "ForeignOmnibridge"
WETH_OMNIBRIDGE_ROUTER = "WETHOmnibridgeRouter"

REQUIRED_CONTRACTS = (
    ETERNAL_STORAGE_PROXY,
    PERMITTABLE_TOKEN,
    TOKEN_FACTORY,
    GAS_LIMIT_MANAGER,
    FOREIGN_OMNIBRIDGE,
    WETH_OMNIBRIDGE_ROUTER,
)

FOREIGN_NETWORK = "foreign"

# Label passed to upgradeTo() when linking the mediator implementation
INITIAL_PROXY_VERSION = "1"

# Legacy contract compiled with 0.4.24; its flat file lives in precompiled/
LEGACY_CONTRACT_NAME = PERMITTABLE_TOKEN

# Verification settings used when the legacy artifact carries no readable metadata
LEGACY_VERIFICATION_DEFAULTS = {
    "optimization_used": True,
    "runs": 200,
    "evm_version": "default",
}

# Build tag that solc-js appends to the version string; explorers reject it
COMPILER_BUILD_TAG = ".Emscripten.clang"

FLAT_SUFFIX = "_flat.sol"

# Explorer response markers
REQUEST_STATUS_OK = "OK"
CONTRACT_CODE_NOT_FOUND = "Unable to locate ContractCode"
ETHERSCAN_URL_MARKER = "etherscan"

# Verification retry policy
VERIFY_MAX_ATTEMPTS = 10
VERIFY_BACKOFF_INITIAL = 1.0  # seconds
VERIFY_BACKOFF_FACTOR = 2.0
VERIFY_BACKOFF_MAX = 60.0  # seconds
VERIFY_REQUEST_TIMEOUT = 30  # seconds

# Transaction defaults
DEFAULT_GAS_PRICE_GWEI = 10
DEFAULT_GAS_LIMIT_EXTRA = 0.25
DEFAULT_TX_TIMEOUT = 120  # seconds
