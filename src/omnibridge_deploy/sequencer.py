"""Nonce sequencing for a single deployment account."""

import logging
import threading

from .chain import ChainClient
from .exceptions import ChainClientError, NonceFetchError

logger = logging.getLogger(__name__)


class NonceSequencer:
    """
    Hands out consecutive nonces for one sender within one deployment run.

    The starting value is read from the network once; afterwards the network
    is never queried again, so every transaction in the run must take its
    nonce from next() in the order it is meant to be mined.
    """

    def __init__(self, initial_nonce: int):
        if initial_nonce < 0:
            raise ValueError(f"Nonce must be non-negative, got {initial_nonce}")
        self._initial = initial_nonce
        self._next = initial_nonce
        self._lock = threading.Lock()

    @classmethod
    def start(cls, client: ChainClient, address: str) -> "NonceSequencer":
        """
        Create a sequencer starting at the account's current transaction count.

        Raises:
            NonceFetchError: If the transaction count cannot be fetched
        """
        try:
            initial = client.get_transaction_count(address)
        except ChainClientError as e:
            raise NonceFetchError(f"Cannot fetch starting nonce for {address}: {e}") from e

        logger.info("Starting nonce for %s: %d", address, initial)
        return cls(initial)

    def next(self) -> int:
        """Return the nonce for the next transaction and advance."""
        with self._lock:
            nonce = self._next
            self._next += 1
        return nonce

    @property
    def current(self) -> int:
        """Nonce the next call to next() will return."""
        return self._next

    @property
    def issued(self) -> int:
        """Number of nonces handed out so far."""
        return self._next - self._initial
