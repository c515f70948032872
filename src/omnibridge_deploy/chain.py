"""Network RPC boundary used by the deployer and sequencer."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from eth_account import Account
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from .constants import DEFAULT_GAS_LIMIT_EXTRA, DEFAULT_TX_TIMEOUT
from .exceptions import ChainClientError, TransactionFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionReceipt:
    """The parts of a mined transaction receipt the deployment relies on."""

    transaction_hash: str
    block_number: int
    contract_address: Optional[str] = None


class ChainClient(Protocol):
    """Operations the deployment needs from a network, for one sender account."""

    def get_transaction_count(self, address: str) -> int: ...

    def chain_id(self) -> int: ...

    def submit_contract_creation(
        self, bytecode: str, constructor_data: str, nonce: int
    ) -> TransactionReceipt: ...

    def submit_call(self, target: str, data: str, nonce: int) -> TransactionReceipt: ...


class Web3ChainClient:
    """
    ChainClient backed by web3.py and a local signing key.

    Every submission blocks until the transaction is mined or ``timeout``
    seconds have passed.
    """

    def __init__(
        self,
        web3: Web3,
        private_key: str,
        gas_price_wei: int,
        gas_limit_extra: float = DEFAULT_GAS_LIMIT_EXTRA,
        timeout: float = DEFAULT_TX_TIMEOUT,
    ):
        self._web3 = web3
        self._account = Account.from_key(private_key)
        self._gas_price_wei = gas_price_wei
        self._gas_limit_extra = gas_limit_extra
        self._timeout = timeout
        self._chain_id: Optional[int] = None

    @classmethod
    def from_rpc_url(
        cls,
        rpc_url: str,
        private_key: str,
        gas_price_gwei: float,
        gas_limit_extra: float = DEFAULT_GAS_LIMIT_EXTRA,
        timeout: float = DEFAULT_TX_TIMEOUT,
    ) -> "Web3ChainClient":
        web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
        return cls(
            web3,
            private_key,
            Web3.to_wei(gas_price_gwei, "gwei"),
            gas_limit_extra=gas_limit_extra,
            timeout=timeout,
        )

    @property
    def address(self) -> str:
        """Checksummed address of the deployment account."""
        return self._account.address

    def get_transaction_count(self, address: str) -> int:
        try:
            return self._web3.eth.get_transaction_count(Web3.to_checksum_address(address))
        except (Web3Exception, OSError, ValueError) as e:
            raise ChainClientError(f"Failed to get transaction count for {address}: {e}") from e

    def chain_id(self) -> int:
        if self._chain_id is None:
            try:
                self._chain_id = self._web3.eth.chain_id
            except (Web3Exception, OSError, ValueError) as e:
                raise ChainClientError(f"Failed to get chain id: {e}") from e
        return self._chain_id

    def submit_contract_creation(
        self, bytecode: str, constructor_data: str, nonce: int
    ) -> TransactionReceipt:
        receipt = self._send({"data": bytecode + constructor_data}, nonce)
        if not receipt.contract_address:
            raise TransactionFailedError(
                f"Transaction {receipt.transaction_hash} created no contract"
            )
        return receipt

    def submit_call(self, target: str, data: str, nonce: int) -> TransactionReceipt:
        return self._send({"to": Web3.to_checksum_address(target), "data": data}, nonce)

    def _send(self, fields: Dict[str, Any], nonce: int) -> TransactionReceipt:
        tx: Dict[str, Any] = {
            "from": self.address,
            "nonce": nonce,
            "gasPrice": self._gas_price_wei,
            "chainId": self.chain_id(),
            **fields,
        }

        try:
            estimated = self._web3.eth.estimate_gas(tx)
            tx["gas"] = int(estimated * (1 + self._gas_limit_extra))

            signed = self._account.sign_transaction(tx)
            tx_hash = self._web3.eth.send_raw_transaction(signed.raw_transaction)
            logger.debug("Sent transaction %s with nonce %d", Web3.to_hex(tx_hash), nonce)

            receipt = self._web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._timeout
            )
        except TimeExhausted as e:
            raise TransactionFailedError(
                f"Transaction with nonce {nonce} was not mined within {self._timeout}s"
            ) from e
        except (Web3Exception, OSError, ValueError) as e:
            raise TransactionFailedError(f"Transaction with nonce {nonce} failed: {e}") from e

        tx_hash_hex = Web3.to_hex(receipt["transactionHash"])
        if receipt["status"] == 0:
            raise TransactionFailedError(f"Transaction {tx_hash_hex} reverted")

        return TransactionReceipt(
            transaction_hash=tx_hash_hex,
            block_number=receipt["blockNumber"],
            contract_address=receipt.get("contractAddress"),
        )
