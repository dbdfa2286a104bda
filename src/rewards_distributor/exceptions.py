"""Error taxonomy for the distribution pipeline.

Every failure raised by the service derives from DistributorError so the
scheduled-run boundary can catch them as one family.
"""

from typing import Optional


class DistributorError(Exception):
    """Base class for all distributor errors."""
    pass


class ConfigurationError(DistributorError):
    """Invalid or missing configuration. Fatal at startup."""
    pass


class TransportError(DistributorError):
    """RPC call failed (network, endpoint down, malformed response)."""

    def __init__(self, method: str, message: str):
        self.method = method
        super().__init__(f"{method} failed: {message}")


class ExecutionReverted(DistributorError):
    """The node reported a revert for eth_call / eth_estimateGas."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(raw)


class ContractNotDeployed(DistributorError):
    """No bytecode found at the configured contract address."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"No contract code deployed at {address}")


class PreflightFailed(DistributorError):
    """Pre-flight status check failed while running in enforce mode."""
    pass


class SimulationRejected(DistributorError):
    """The read-only simulation of the distribution call reverted.

    Attributes:
        reason: Classified revert reason, or None when unmatched
        raw: Raw provider error text
    """

    def __init__(self, reason, raw: str):
        self.reason = reason
        self.raw = raw
        detail = reason.description if reason is not None else raw
        super().__init__(f"Contract rejected distribution: {detail}")


class SubmissionFailed(DistributorError):
    """Signing or broadcasting the transaction failed."""
    pass


class ConfirmationTimeout(DistributorError):
    """Receipt was not observed within the timeout window.

    The transaction may still be mined later; it is not cancelled or replaced.
    """

    def __init__(self, tx_hash: str, timeout: float):
        self.tx_hash = tx_hash
        self.timeout = timeout
        super().__init__(f"Transaction {tx_hash} not confirmed after {timeout:.0f}s")


class OnChainRevert(DistributorError):
    """Transaction was mined but its receipt reports failure."""

    def __init__(self, tx_hash: str, block_number: Optional[int] = None):
        self.tx_hash = tx_hash
        self.block_number = block_number
        super().__init__(f"Transaction {tx_hash} reverted on-chain (block {block_number})")


class RunAlreadyInProgress(DistributorError):
    """A distribution run is already in flight for this signer."""
    pass
