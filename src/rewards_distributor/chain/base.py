"""Base interface for chain access.

One ChainClient wraps one RPC endpoint under one signing identity. All
operations are primitive: no retries, no fallbacks. RPC faults raise
TransportError and are never swallowed here.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from rewards_distributor.models import Receipt, TransactionRequest

logger = logging.getLogger(__name__)


class ChainClient(ABC):
    """Abstract base class for EVM chain access."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed address of the signing identity."""
        pass

    @abstractmethod
    async def get_balance(self, address: Optional[str] = None) -> int:
        """Get account balance in wei (defaults to the signer)."""
        pass

    @abstractmethod
    async def get_transaction_count(self, address: Optional[str] = None) -> int:
        """Get pending nonce (defaults to the signer)."""
        pass

    @abstractmethod
    async def get_gas_price(self) -> int:
        """Get current network gas price in wei."""
        pass

    @abstractmethod
    async def get_code(self, address: str) -> bytes:
        """Get deployed bytecode at address."""
        pass

    @abstractmethod
    async def call(self, tx: dict) -> bytes:
        """Execute a read-only call.

        Raises:
            ExecutionReverted: If the node reports a revert
            TransportError: On RPC failure
        """
        pass

    @abstractmethod
    async def estimate_gas(self, tx: dict) -> int:
        """Estimate gas for a call.

        Raises:
            ExecutionReverted: If the node reports a revert
            TransportError: On RPC failure
        """
        pass

    @abstractmethod
    async def send_transaction(self, request: TransactionRequest) -> str:
        """Sign and broadcast a transaction.

        Returns immediately after broadcast; does not wait for inclusion.

        Returns:
            Transaction hash as 0x-prefixed hex

        Raises:
            SubmissionFailed: If local signing fails
            TransportError: If broadcast fails
        """
        pass

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        """Get receipt, or None while the transaction is not yet mined."""
        pass

    @abstractmethod
    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        """Get transaction details, or None if unknown."""
        pass

    @abstractmethod
    async def get_chain_id(self) -> int:
        pass

    @abstractmethod
    async def get_block_number(self) -> int:
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address={self.address})"
