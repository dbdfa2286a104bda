"""Data models shared across the distribution pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class PreflightMode(str, Enum):
    """How pre-flight status findings are treated."""

    ADVISORY = "advisory"    # Log findings and continue
    ENFORCE = "enforce"      # Abort submission on any finding


@dataclass(frozen=True)
class GasPolicy:
    """Configured gas settings.

    Attributes:
        gas_limit: Fallback gas limit when estimation fails
        gas_price: Fixed gas price in wei (None = derive from network)
    """
    gas_limit: int = 500_000
    gas_price: Optional[int] = None


@dataclass
class ContractStatus:
    """Best-effort snapshot of the rewards contract state.

    Each field keeps its default when the corresponding read fails.
    """
    is_active: bool = False
    is_paused: bool = False
    can_distribute: bool = False
    owner: str = ZERO_ADDRESS
    last_distribution_time: Optional[int] = None
    rewards_pool: int = 0
    total_rewards: Optional[int] = None
    rewards_per_day: Optional[int] = None


@dataclass(frozen=True)
class TransactionRequest:
    """Legacy (type 0) transaction ready for signing."""
    to: str
    data: bytes
    gas: int
    gas_price: int
    nonce: int
    chain_id: int
    value: int = 0

    def to_tx_params(self) -> dict:
        """Render as web3 transaction params."""
        return {
            "to": self.to,
            "value": self.value,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "data": self.data,
            "nonce": self.nonce,
            "chainId": self.chain_id,
        }


@dataclass(frozen=True)
class Receipt:
    """Terminal outcome of a mined transaction."""
    tx_hash: str
    status: int
    block_number: int
    gas_used: int

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass
class NetworkInfo:
    """Network snapshot for diagnostics."""
    chain_id: int
    block_number: int
    gas_price: int
    is_local_dev: bool
