"""Scheduled distribution runs.

DistributionJob is the scheduled-run boundary: it submits, waits for
confirmation and logs the outcome, and never lets an error escape into the
scheduler. DailyScheduler fires the job once a day at a fixed local time
(or every minute in test mode).
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from rewards_distributor.confirmation import ConfirmationTracker
from rewards_distributor.contract.gateway import ContractGateway
from rewards_distributor.exceptions import (
    DistributorError,
    OnChainRevert,
    RunAlreadyInProgress,
)
from rewards_distributor.models import Receipt
from rewards_distributor.utils.locks import RunGuard

logger = logging.getLogger(__name__)


def next_run_time(now: datetime, hour: int, minute: int) -> datetime:
    """Next occurrence of hour:minute strictly after now."""
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def next_minute(now: datetime) -> datetime:
    """Start of the next minute strictly after now."""
    return now.replace(second=0, microsecond=0) + timedelta(minutes=1)


class DistributionJob:
    """One submit-and-confirm run, guarded against overlap."""

    def __init__(
        self,
        gateway: ContractGateway,
        tracker: ConfirmationTracker,
        guard: Optional[RunGuard] = None,
    ):
        self.gateway = gateway
        self.tracker = tracker
        self.guard = guard or RunGuard("distribution")

    async def run_once(self) -> Receipt:
        """Submit the distribution and wait for it to be mined.

        Raises:
            RunAlreadyInProgress: If another run holds the guard
            OnChainRevert: If the transaction was mined but failed
            DistributorError: Any other pipeline failure
        """
        async with self.guard:
            logger.info("Starting daily reward distribution...")
            tx_hash = await self.gateway.submit_distribution()
            logger.info(f"Distribution submitted, tx hash: {tx_hash}")

            receipt = await self.tracker.await_confirmation(tx_hash)
            if not receipt.succeeded:
                raise OnChainRevert(tx_hash, receipt.block_number)

            logger.info(f"Distribution confirmed in block {receipt.block_number}")
            return receipt

    async def run_scheduled(self) -> bool:
        """Run once, logging every failure instead of raising.

        Returns:
            True if the distribution was confirmed successfully
        """
        try:
            await self.run_once()
            return True
        except RunAlreadyInProgress as e:
            logger.warning(f"Skipping scheduled distribution: {e}")
        except DistributorError as e:
            logger.error(f"Daily reward distribution failed: {e.__class__.__name__}: {e}")
        except Exception:
            logger.exception("Unexpected error during daily reward distribution")
        return False


class DailyScheduler:
    """Fires a job at a fixed local time every day."""

    def __init__(
        self,
        job: DistributionJob,
        hour: int = 0,
        minute: int = 0,
        every_minute: bool = False,
        now: Callable[[], datetime] = datetime.now,
    ):
        """Initialize scheduler.

        Args:
            job: Job to fire
            hour: Local hour of the daily trigger
            minute: Local minute of the daily trigger
            every_minute: Fire at the start of every minute instead (testing)
            now: Current local time source
        """
        self.job = job
        self.hour = hour
        self.minute = minute
        self.every_minute = every_minute
        self._now = now
        self._tasks: set[asyncio.Task] = set()

    def next_fire_time(self, after: Optional[datetime] = None) -> datetime:
        now = self._now()
        if after is not None and after > now:
            now = after
        if self.every_minute:
            return next_minute(now)
        return next_run_time(now, self.hour, self.minute)

    def fire(self) -> asyncio.Task:
        """Start one run in the background.

        Runs are not awaited by the loop, so a run still waiting for
        confirmation meets the job's guard when the next trigger fires.
        """
        logger.info(f"Running daily task at {self._now():%Y-%m-%d %H:%M:%S}")
        task = asyncio.create_task(self.job.run_scheduled())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self) -> None:
        """Trigger loop; runs until cancelled."""
        if self.every_minute:
            logger.info("Scheduler started (test mode, firing every minute)")
        else:
            logger.info(f"Scheduler started, daily at {self.hour:02d}:{self.minute:02d}")

        fire_at = None
        while True:
            fire_at = self.next_fire_time(after=fire_at)
            delay = max((fire_at - self._now()).total_seconds(), 0.0)
            logger.info(f"Next distribution at {fire_at:%Y-%m-%d %H:%M:%S} (in {delay:.0f}s)")
            await asyncio.sleep(delay)
            self.fire()

    async def shutdown(self) -> None:
        """Cancel in-flight runs."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        logger.info("Scheduler stopped")
