"""Submission pipeline for the daily reward distribution.

Distribution flow:
1. Pre-flight: read a best-effort contract status snapshot
2. Simulate the call with eth_call (hard gate)
3. Estimate gas (falls back to configured limit)
4. Buffer the gas limit for the network class
5. Resolve gas price (fixed, or derived from the live price)
6. Read the pending nonce right before building
7. Sign and broadcast, return the transaction hash
"""

import logging
import time
from typing import Callable, Optional

from web3 import Web3

from rewards_distributor.chain.base import ChainClient
from rewards_distributor.chains import get_network_policy
from rewards_distributor.contract.abi import DISTRIBUTE_FUNCTION, decode_output, encode_call
from rewards_distributor.contract.reverts import classify_revert
from rewards_distributor.exceptions import (
    ContractNotDeployed,
    DistributorError,
    ExecutionReverted,
    PreflightFailed,
    SimulationRejected,
    SubmissionFailed,
    TransportError,
)
from rewards_distributor.models import (
    ContractStatus,
    GasPolicy,
    NetworkInfo,
    PreflightMode,
    TransactionRequest,
)

logger = logging.getLogger(__name__)

# Minimum spacing between distributions expected by the contract
MIN_DISTRIBUTION_INTERVAL = 23 * 3600

# ContractStatus field -> view function
_STATUS_READS = {
    "is_active": "isActive",
    "owner": "owner",
    "last_distribution_time": "lastDistributionTime",
    "is_paused": "paused",
    "can_distribute": "canDistribute",
    "rewards_pool": "getRewardsPool",
    "total_rewards": "totalRewards",
    "rewards_per_day": "rewardsPerDay",
}


def find_preflight_problems(
    status: ContractStatus,
    is_local_dev: bool,
    now: Optional[float] = None,
) -> list[str]:
    """List the status conditions that would block a distribution.

    The interval check is skipped on local/dev networks.
    """
    problems = []

    if not status.is_active:
        problems.append("contract is not active")
    if status.is_paused:
        problems.append("contract is paused")
    if not status.can_distribute:
        problems.append("distribution not currently allowed (interval may not have elapsed)")
    if status.rewards_pool == 0:
        problems.append("rewards pool balance is zero")

    if status.last_distribution_time is not None and not is_local_dev:
        current = int(now if now is not None else time.time())
        elapsed = current - status.last_distribution_time
        if elapsed < MIN_DISTRIBUTION_INTERVAL:
            hours_remaining = (MIN_DISTRIBUTION_INTERVAL - elapsed) // 3600
            problems.append(
                f"less than 23 hours since last distribution, {hours_remaining} hours remaining"
            )

    return problems


class ContractGateway:
    """Builds and submits the reward-distribution transaction."""

    def __init__(
        self,
        client: ChainClient,
        contract_address: str,
        chain_id: int,
        gas_policy: Optional[GasPolicy] = None,
        preflight_mode: PreflightMode = PreflightMode.ADVISORY,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize gateway.

        Args:
            client: Chain access under the signing identity
            contract_address: Rewards contract address
            chain_id: Configured chain id (drives network policy)
            gas_policy: Fallback gas limit and optional fixed gas price
            preflight_mode: Whether status findings abort submission
            clock: Wall clock used for the interval check
        """
        self.client = client
        self._contract_address = Web3.to_checksum_address(contract_address)
        self._chain_id = chain_id
        self.gas_policy = gas_policy or GasPolicy()
        self.preflight_mode = preflight_mode
        self.policy = get_network_policy(chain_id)
        self._clock = clock

    # ======================
    # Accessors
    # ======================

    @property
    def signer_address(self) -> str:
        return self.client.address

    @property
    def contract_address(self) -> str:
        return self._contract_address

    @property
    def gas_limit(self) -> int:
        return self.gas_policy.gas_limit

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def is_local_dev(self) -> bool:
        return self.policy.is_local_dev

    # ======================
    # Submission
    # ======================

    async def submit_distribution(self) -> str:
        """Run the full pipeline and broadcast the distribution call.

        Returns:
            Transaction hash

        Raises:
            PreflightFailed: Status findings in enforce mode
            SimulationRejected: The call would revert
            SubmissionFailed: Signing or broadcast failed
        """
        logger.info("Preparing daily reward distribution...")

        await self.preflight_checks()
        await self.simulate_distribution()

        logger.info("Pre-flight and simulation passed, sending transaction...")

        gas_estimate = await self.estimate_gas()
        gas_limit = self.buffered_gas_limit(gas_estimate)
        logger.info(f"Using gas limit: {gas_limit} (estimate {gas_estimate})")

        tx_request = await self.build_transaction(gas_limit)

        logger.info("Sending transaction to network...")
        try:
            tx_hash = await self.client.send_transaction(tx_request)
        except SubmissionFailed:
            raise
        except DistributorError as e:
            raise SubmissionFailed(f"Failed to broadcast distribution: {e}") from e

        logger.info(f"Transaction sent, hash: {tx_hash}")
        return tx_hash

    async def preflight_checks(self) -> ContractStatus:
        """Read contract status and apply the pre-flight policy."""
        logger.info("Running pre-distribution checks...")

        status = await self.get_contract_status()
        logger.info(f"Contract status: {status}")
        logger.info(f"Caller: {self.signer_address}")

        problems = find_preflight_problems(status, self.is_local_dev, self._clock())
        if problems:
            if self.preflight_mode == PreflightMode.ENFORCE:
                raise PreflightFailed("Pre-flight check failed: " + "; ".join(problems))
            for problem in problems:
                logger.warning(f"Pre-flight (advisory): {problem}")
        else:
            logger.info("All pre-flight checks passed")

        return status

    def _call_params(self) -> dict:
        return {
            "from": self.signer_address,
            "to": self.contract_address,
            "value": 0,
            "data": encode_call(DISTRIBUTE_FUNCTION),
        }

    async def simulate_distribution(self) -> None:
        """Dry-run the distribution call with eth_call.

        Raises:
            SimulationRejected: With the classified reason when recognised
        """
        logger.info("Simulating transaction...")

        tx = self._call_params()
        tx["gas"] = self.gas_limit
        if self.gas_policy.gas_price is not None:
            tx["gasPrice"] = self.gas_policy.gas_price

        try:
            await self.client.call(tx)
        except ExecutionReverted as e:
            reason = classify_revert(e.raw)
            if reason is not None:
                logger.error(f"Simulation reverted: {reason.description}")
            else:
                logger.error(f"Simulation reverted: {e.raw}")
            raise SimulationRejected(reason, e.raw) from e
        except TransportError as e:
            # Not a contract decision, so never classified
            logger.error(f"Simulation failed: {e}")
            raise SimulationRejected(None, str(e)) from e

        logger.info("Simulation succeeded")

    async def estimate_gas(self) -> int:
        """Estimate gas for the distribution call, never fatal."""
        try:
            gas = await self.client.estimate_gas(self._call_params())
        except DistributorError as e:
            logger.warning(f"Gas estimation failed, using default {self.gas_limit}: {e}")
            return self.gas_limit

        logger.info(f"Gas estimate: {gas}")
        return gas

    def buffered_gas_limit(self, gas: int) -> int:
        """Apply the network safety margin to a gas estimate."""
        return self.policy.buffer_gas(gas)

    async def resolve_gas_price(self) -> int:
        """Pick the gas price for the transaction.

        A configured price always wins and the network is not queried.
        """
        if self.gas_policy.gas_price is not None:
            return self.gas_policy.gas_price

        try:
            network_price = await self.client.get_gas_price()
        except DistributorError as e:
            logger.warning(f"Gas price query failed, using default: {e}")
            return self.policy.default_gas_price

        gas_price = self.policy.adjust_gas_price(network_price)
        if gas_price <= 0:
            logger.warning(f"Network reported gas price {network_price}, using default")
            return self.policy.default_gas_price
        return gas_price

    async def build_transaction(self, gas_limit: int) -> TransactionRequest:
        """Assemble the legacy transaction for the distribution call."""
        call_data = encode_call(DISTRIBUTE_FUNCTION)
        gas_price = await self.resolve_gas_price()

        # Read last so it is as fresh as possible at send time
        try:
            nonce = await self.client.get_transaction_count()
        except DistributorError as e:
            raise SubmissionFailed(f"Failed to read nonce: {e}") from e

        logger.info("Building legacy transaction:")
        logger.info(f"  - To: {self.contract_address}")
        logger.info(f"  - From: {self.signer_address}")
        logger.info(f"  - Nonce: {nonce}")
        logger.info(f"  - Gas Limit: {gas_limit}")
        logger.info(f"  - Gas Price: {Web3.from_wei(gas_price, 'gwei')} Gwei")
        logger.info(f"  - Data Length: {len(call_data)} bytes")

        return TransactionRequest(
            to=self.contract_address,
            data=call_data,
            gas=gas_limit,
            gas_price=gas_price,
            nonce=nonce,
            chain_id=self.chain_id,
        )

    # ======================
    # Reads
    # ======================

    async def _read(self, function: str):
        data = await self.client.call({"to": self.contract_address, "data": encode_call(function)})
        return decode_output(function, data)

    async def get_contract_status(self) -> ContractStatus:
        """Read every status field, keeping defaults for failed reads."""
        logger.info("Reading contract status...")

        status = ContractStatus()
        for field_name, function in _STATUS_READS.items():
            try:
                value = await self._read(function)
            except (DistributorError, ValueError) as e:
                # Optional functions may not exist on every deployment
                logger.debug(f"Status read {function}() failed: {e}")
                continue
            setattr(status, field_name, value)

        return status

    async def is_contract_active(self) -> bool:
        """Check isActive(), assuming active when it cannot be read."""
        try:
            return await self._read("isActive")
        except (DistributorError, ValueError) as e:
            logger.warning(f"Could not check contract state: {e}")
            return True

    async def get_last_distribution_time(self) -> int:
        return await self._read("lastDistributionTime")

    async def get_balance(self) -> int:
        """Signer balance in wei."""
        return await self.client.get_balance()

    async def get_network_info(self) -> NetworkInfo:
        chain_id = await self.client.get_chain_id()
        block_number = await self.client.get_block_number()
        try:
            gas_price = await self.resolve_gas_price()
        except DistributorError:
            gas_price = 0

        return NetworkInfo(
            chain_id=chain_id,
            block_number=block_number,
            gas_price=gas_price,
            is_local_dev=self.is_local_dev,
        )

    async def test_connection(self) -> ContractStatus:
        """Check that the contract is deployed and log its status.

        Raises:
            ContractNotDeployed: If there is no code at the address
        """
        logger.info("Testing contract connection...")

        code = await self.client.get_code(self.contract_address)
        if not code:
            raise ContractNotDeployed(self.contract_address)

        logger.info(f"Contract code size: {len(code)} bytes")

        status = await self.get_contract_status()
        logger.info(f"Contract status: {status}")
        return status
