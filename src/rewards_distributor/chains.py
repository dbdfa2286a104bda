"""Network classification and the numeric policy that depends on it.

A chain id is either a well-known local/development chain (Ganache, Hardhat,
Anvil and friends) or a production network. Gas buffering, gas price limits
and confirmation polling all differ between the two.
"""

from dataclasses import dataclass
from typing import Optional

from web3 import Web3

# Hardhat/Anvil (31337), Ganache (1337, 5777), Ganache alt (1338)
LOCAL_DEV_CHAIN_IDS: frozenset[int] = frozenset({1337, 31337, 1338, 5777})


@dataclass(frozen=True)
class NetworkPolicy:
    """Numeric policy for one class of network."""

    # Required fields
    is_local_dev: bool
    gas_buffer_percent: int        # Applied to estimated gas limit
    default_gas_price: int         # Wei, used when eth_gasPrice fails
    poll_interval: float           # Seconds between receipt polls
    confirmation_timeout: float    # Seconds before giving up on a receipt

    # Optional fields
    gas_price_ceiling: Optional[int] = None  # Wei, local/dev only
    gas_price_premium_percent: int = 0    # Added on top of live price

    def buffer_gas(self, gas: int) -> int:
        """Apply the safety buffer to a gas limit."""
        return gas * self.gas_buffer_percent // 100

    def adjust_gas_price(self, network_price: int) -> int:
        """Derive the price to use from the live network price."""
        if self.gas_price_ceiling is not None:
            return min(network_price, self.gas_price_ceiling)
        return network_price * (100 + self.gas_price_premium_percent) // 100


LOCAL_DEV_POLICY = NetworkPolicy(
    is_local_dev=True,
    gas_buffer_percent=150,
    default_gas_price=Web3.to_wei(20, "gwei"),
    poll_interval=1.0,
    confirmation_timeout=60.0,
    gas_price_ceiling=Web3.to_wei(20, "gwei"),
)

PRODUCTION_POLICY = NetworkPolicy(
    is_local_dev=False,
    gas_buffer_percent=120,
    default_gas_price=Web3.to_wei(30, "gwei"),
    poll_interval=5.0,
    confirmation_timeout=300.0,
    gas_price_premium_percent=10,
)


def is_local_development_network(chain_id: int) -> bool:
    """Check if chain id belongs to a local test node."""
    return chain_id in LOCAL_DEV_CHAIN_IDS


def get_network_policy(chain_id: int) -> NetworkPolicy:
    """Get the numeric policy for a chain id."""
    if is_local_development_network(chain_id):
        return LOCAL_DEV_POLICY
    return PRODUCTION_POLICY
