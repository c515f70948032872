"""Shared pytest fixtures for omnibridge-deploy tests."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from omnibridge_deploy.artifacts import load_artifacts
from omnibridge_deploy.chain import TransactionReceipt
from omnibridge_deploy.config import BridgeConfig
from omnibridge_deploy.exceptions import ChainClientError, TransactionFailedError
from omnibridge_deploy.types import CompiledArtifact

OWNER = "0x" + "aa" * 20
AMB_BRIDGE = "0x" + "bb" * 20
TOKEN_FACTORY = "0x" + "fa" * 20
TOKEN_IMAGE = "0x" + "1e" * 20
WETH = "0x" + "ee" * 20


class FakeChainClient:
    """In-memory ChainClient that records every transaction it receives."""

    address = OWNER

    def __init__(
        self,
        transaction_count: int = 7,
        chain_id: int = 100,
        fail_on_nonce: Optional[int] = None,
        unreachable: bool = False,
    ):
        self.transaction_count = transaction_count
        self._chain_id = chain_id
        self.fail_on_nonce = fail_on_nonce
        self.unreachable = unreachable
        self.transactions: List[Dict[str, Any]] = []
        self.count_queries = 0

    @property
    def nonces(self) -> List[int]:
        return [tx["nonce"] for tx in self.transactions]

    def get_transaction_count(self, address: str) -> int:
        self.count_queries += 1
        if self.unreachable:
            raise ChainClientError("connection refused")
        return self.transaction_count

    def chain_id(self) -> int:
        return self._chain_id

    def _record(self, tx: Dict[str, Any]) -> TransactionReceipt:
        if tx["nonce"] == self.fail_on_nonce:
            raise TransactionFailedError(f"Transaction with nonce {tx['nonce']} reverted")
        self.transactions.append(tx)
        index = len(self.transactions)
        return TransactionReceipt(
            transaction_hash="0x" + f"{index:064x}",
            block_number=1000 + index,
            contract_address=("0x" + f"{0xC0DE0000 + index:040x}") if tx["kind"] == "create" else None,
        )

    def submit_contract_creation(
        self, bytecode: str, constructor_data: str, nonce: int
    ) -> TransactionReceipt:
        return self._record(
            {"kind": "create", "nonce": nonce, "bytecode": bytecode, "args": constructor_data}
        )

    def submit_call(self, target: str, data: str, nonce: int) -> TransactionReceipt:
        return self._record({"kind": "call", "nonce": nonce, "to": target, "data": data})


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def build_dir(fixtures_dir: Path) -> Path:
    """Directory holding the sample compiled artifacts."""
    return fixtures_dir / "build" / "contracts"


@pytest.fixture
def flats_dir(fixtures_dir: Path) -> Path:
    return fixtures_dir / "flats"


@pytest.fixture
def precompiled_dir(fixtures_dir: Path) -> Path:
    return fixtures_dir / "precompiled"


@pytest.fixture
def artifacts(build_dir: Path) -> Dict[str, CompiledArtifact]:
    """All sample artifacts keyed by contract name."""
    return load_artifacts(build_dir)


@pytest.fixture
def sample_artifact_json(build_dir: Path) -> Dict[str, Any]:
    """Raw JSON of the sample TokenFactory artifact."""
    with open(build_dir / "TokenFactory.json") as f:
        return json.load(f)


@pytest.fixture
def bridge_config() -> BridgeConfig:
    """Configuration that deploys every piece of token infrastructure, without WETH router."""
    return BridgeConfig(
        rpc_url="http://localhost:8545",
        private_key="0x" + "11" * 32,
        bridge_owner=OWNER,
        amb_bridge=AMB_BRIDGE,
        mediator_request_gas_limit=2_000_000,
        token_name_suffix=" on Mainnet",
    )


@pytest.fixture
def chain_client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture
def bridge_env() -> Dict[str, str]:
    """Minimal environment accepted by load_config()."""
    return {
        "FOREIGN_RPC_URL": "http://localhost:8545",
        "DEPLOYMENT_ACCOUNT_PRIVATE_KEY": "0x" + "11" * 32,
        "FOREIGN_BRIDGE_OWNER": OWNER,
        "FOREIGN_AMB_BRIDGE": AMB_BRIDGE,
        "FOREIGN_MEDIATOR_REQUEST_GAS_LIMIT": "2000000",
    }
