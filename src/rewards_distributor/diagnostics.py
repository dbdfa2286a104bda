"""Operator diagnostics for the rewards contract.

Runs a read-only sweep over connectivity, network, account and contract
state, reporting each finding as a pass/fail line. Nothing here is fatal:
every failure is logged and recorded in the report.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from web3 import Web3

from rewards_distributor.confirmation import ConfirmationTracker
from rewards_distributor.contract.gateway import MIN_DISTRIBUTION_INTERVAL, ContractGateway
from rewards_distributor.exceptions import DistributorError
from rewards_distributor.models import ContractStatus, Receipt
from rewards_distributor.utils.locks import RunGuard

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Outcome of one diagnostic check."""
    name: str
    passed: Optional[bool]     # None = could not be determined
    detail: str = ""

    def render(self) -> str:
        mark = {True: "✅", False: "❌", None: "⚠️ "}[self.passed]
        return f"{mark} {self.name}: {self.detail}" if self.detail else f"{mark} {self.name}"


@dataclass
class DiagnosticReport:
    """All check results from one diagnose() pass."""
    checks: list[CheckResult] = field(default_factory=list)

    def add(self, check: CheckResult) -> CheckResult:
        self.checks.append(check)
        logger.info(check.render())
        return check

    @property
    def passed(self) -> bool:
        return all(c.passed is not False for c in self.checks)

    @property
    def failures(self) -> list[CheckResult]:
        return [c for c in self.checks if c.passed is False]


def check_permissions(caller: str, status: ContractStatus) -> CheckResult:
    """Signer must be the recorded contract owner."""
    if caller.lower() == status.owner.lower():
        return CheckResult("permissions", True, "caller is the contract owner")
    return CheckResult(
        "permissions", False, f"caller {caller} is not the owner {status.owner}"
    )


def check_timing(
    status: ContractStatus,
    now: float,
    min_interval: int = MIN_DISTRIBUTION_INTERVAL,
) -> CheckResult:
    """Enough time must have passed since the last distribution."""
    last_time = status.last_distribution_time
    if last_time is None:
        return CheckResult("timing", None, "last distribution time unavailable")

    elapsed = int(now) - last_time
    hours_since = elapsed // 3600
    if elapsed >= min_interval:
        return CheckResult(
            "timing", True, f"last distribution {hours_since}h ago (at {last_time})"
        )

    hours_remaining = (min_interval - elapsed) // 3600
    return CheckResult(
        "timing",
        False,
        f"last distribution {hours_since}h ago, wait {hours_remaining} more hours",
    )


def check_rewards_pool(status: ContractStatus) -> CheckResult:
    """Pool must be non-empty and cover one day of rewards when known."""
    if status.rewards_pool <= 0:
        return CheckResult("rewards pool", False, "pool balance is zero")

    if status.rewards_per_day is not None and status.rewards_pool < status.rewards_per_day:
        return CheckResult(
            "rewards pool",
            False,
            f"insufficient: need {status.rewards_per_day} wei, have {status.rewards_pool} wei",
        )

    return CheckResult("rewards pool", True, f"{status.rewards_pool} wei available")


class ContractDiagnostics:
    """Read-only troubleshooting over a ContractGateway."""

    def __init__(
        self,
        gateway: ContractGateway,
        tracker: ConfirmationTracker,
        clock: Callable[[], float] = time.time,
        guard: Optional[RunGuard] = None,
    ):
        self.gateway = gateway
        self.tracker = tracker
        self._clock = clock
        # Share the scheduled job's guard when running in the same process
        self.guard = guard or RunGuard("distribution")

    async def diagnose(self, simulate: bool = True) -> DiagnosticReport:
        """Run the full diagnostic sweep.

        Args:
            simulate: Also dry-run the distribution call

        Returns:
            DiagnosticReport with one entry per check
        """
        logger.info("=== Starting contract diagnostics ===")
        report = DiagnosticReport()

        logger.info("1. Testing contract connection...")
        try:
            await self.gateway.test_connection()
            report.add(CheckResult("connection", True, f"code found at {self.gateway.contract_address}"))
        except DistributorError as e:
            report.add(CheckResult("connection", False, str(e)))

        logger.info("2. Reading network info...")
        try:
            info = await self.gateway.get_network_info()
            report.add(CheckResult(
                "network",
                True,
                f"chain {info.chain_id}, block {info.block_number}, "
                f"gas {Web3.from_wei(info.gas_price, 'gwei')} Gwei, "
                f"{'local/dev' if info.is_local_dev else 'production'}",
            ))
            if info.chain_id != self.gateway.chain_id:
                report.add(CheckResult(
                    "chain id",
                    False,
                    f"node reports {info.chain_id}, configured {self.gateway.chain_id}",
                ))
        except DistributorError as e:
            report.add(CheckResult("network", False, str(e)))

        logger.info("3. Checking account...")
        try:
            balance = await self.gateway.get_balance()
            report.add(CheckResult(
                "account balance",
                balance > 0,
                f"{self.gateway.signer_address} holds {Web3.from_wei(balance, 'ether')} ETH",
            ))
        except DistributorError as e:
            report.add(CheckResult("account balance", False, str(e)))

        logger.info("4. Reading contract status...")
        status = await self.gateway.get_contract_status()
        logger.info(f"Contract status: {status}")

        logger.info("5. Checking permissions...")
        report.add(check_permissions(self.gateway.signer_address, status))

        logger.info("6. Checking timing...")
        report.add(check_timing(status, self._clock()))

        logger.info("7. Checking rewards pool...")
        report.add(check_rewards_pool(status))

        if simulate:
            logger.info("8. Simulating distribution...")
            try:
                await self.gateway.simulate_distribution()
                report.add(CheckResult("simulation", True, "distributeDailyRewards() would succeed"))
            except DistributorError as e:
                report.add(CheckResult("simulation", False, str(e)))

        logger.info(
            f"=== Diagnostics complete: {len(report.failures)} of {len(report.checks)} checks failed ==="
        )
        return report

    async def manual_distribute(self) -> Optional[Receipt]:
        """Submit one distribution out of schedule and wait for it.

        Submission failures propagate. Confirmation failures are logged and
        None is returned since the transaction may still land.

        Raises:
            RunAlreadyInProgress: If a scheduled run holds the guard
        """
        logger.info("=== Manual distribution ===")

        async with self.guard:
            try:
                tx_hash = await self.gateway.submit_distribution()
            except DistributorError as e:
                logger.error(f"Transaction submission failed: {e}")
                raise

            logger.info(f"Transaction sent: {tx_hash}")

            try:
                receipt = await self.tracker.await_confirmation(tx_hash)
            except DistributorError as e:
                logger.error(f"Waiting for confirmation failed: {e}")
                return None

        if receipt.succeeded:
            logger.info(f"Distribution confirmed in block {receipt.block_number}")
        else:
            logger.error(f"Distribution reverted in block {receipt.block_number}")
        return receipt
