"""Concurrency control for distribution runs.

The signer's nonce is read right before each send, which is only safe while
a single run is in flight. RunGuard enforces that: a second run does not
queue behind the first, it is refused.
"""

import asyncio
import logging

from rewards_distributor.exceptions import RunAlreadyInProgress

logger = logging.getLogger(__name__)


class RunGuard:
    """Non-reentrant single-slot guard.

    Example:
        guard = RunGuard("distribution")
        async with guard:
            tx_hash = await gateway.submit_distribution()
            await tracker.await_confirmation(tx_hash)
    """

    def __init__(self, operation: str = "distribution"):
        """Initialize the guard.

        Args:
            operation: Description of the guarded operation for logging
        """
        self.operation = operation
        self._lock = asyncio.Lock()

    @property
    def in_flight(self) -> bool:
        """True while a run holds the guard."""
        return self._lock.locked()

    async def __aenter__(self) -> "RunGuard":
        """Take the slot or refuse immediately."""
        if self._lock.locked():
            logger.warning(f"Refusing {self.operation}: previous run still in flight")
            raise RunAlreadyInProgress(f"A {self.operation} run is already in progress")

        await self._lock.acquire()
        logger.debug(f"Run guard acquired: {self.operation}")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Release the slot."""
        self._lock.release()
        logger.debug(f"Run guard released: {self.operation}")
        return False
