"""Confirmation tracking for submitted transactions.

Polls eth_getTransactionReceipt at a fixed interval until the transaction is
mined or the overall timeout expires. Interval and timeout come from the
network policy (1s/60s on local chains, 5s/300s on production).
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from rewards_distributor.chain.base import ChainClient
from rewards_distributor.chains import NetworkPolicy
from rewards_distributor.exceptions import ConfirmationTimeout, DistributorError
from rewards_distributor.models import Receipt

logger = logging.getLogger(__name__)


class ConfirmationTracker:
    """Resolves a transaction hash to a terminal receipt."""

    def __init__(
        self,
        client: ChainClient,
        policy: NetworkPolicy,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.poll_interval = policy.poll_interval
        self.timeout = policy.confirmation_timeout
        self._clock = clock
        self._sleep = sleep

    async def await_confirmation(self, tx_hash: str) -> Receipt:
        """Wait for a transaction to be mined.

        A mined transaction is returned whatever its status; a failed status
        is logged, not raised.

        Raises:
            ConfirmationTimeout: If no receipt within the timeout
            TransportError: If a receipt poll fails
        """
        logger.info(f"Waiting for confirmation: {tx_hash}")

        start_time = self._clock()

        while True:
            elapsed = self._clock() - start_time
            if elapsed >= self.timeout:
                raise ConfirmationTimeout(tx_hash, self.timeout)

            receipt = await self.client.get_transaction_receipt(tx_hash)
            if receipt is not None:
                if receipt.succeeded:
                    logger.info(
                        f"Transaction succeeded in block {receipt.block_number} "
                        f"(gas used {receipt.gas_used})"
                    )
                else:
                    logger.error(
                        f"Transaction failed in block {receipt.block_number} "
                        f"(status {receipt.status})"
                    )
                    await self._log_failed_transaction(tx_hash)
                return receipt

            logger.debug("Transaction not yet mined, waiting...")
            await self._sleep(self.poll_interval)

    async def _log_failed_transaction(self, tx_hash: str) -> None:
        details: Optional[dict] = None
        try:
            details = await self.client.get_transaction(tx_hash)
        except DistributorError as e:
            logger.debug(f"Could not fetch failed transaction details: {e}")

        if details:
            logger.error(f"Failed transaction details: {details}")
