"""Chain access.

- ChainClient: primitive reads/writes against one RPC endpoint
- Web3ChainClient: AsyncWeb3 + eth_account implementation
"""

from rewards_distributor.chain.base import ChainClient
from rewards_distributor.chain.client import Web3ChainClient

__all__ = ["ChainClient", "Web3ChainClient"]
