"""web3.py implementation of ChainClient.

Uses AsyncWeb3 over HTTP for reads and broadcast, and eth_account for local
signing of legacy transactions.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import aiohttp
from eth_account import Account
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, TransactionNotFound, Web3Exception

from rewards_distributor.chain.base import ChainClient
from rewards_distributor.exceptions import (
    ExecutionReverted,
    SubmissionFailed,
    TransportError,
)
from rewards_distributor.models import Receipt, TransactionRequest

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30.0


class Web3ChainClient(ChainClient):
    """ChainClient backed by AsyncWeb3 and a local private key."""

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize client.

        Args:
            rpc_url: HTTP(S) JSON-RPC endpoint
            private_key: Signing key as hex
            request_timeout: Per-request timeout in seconds
        """
        self.rpc_url = rpc_url
        self._account = Account.from_key(private_key)
        self.w3 = AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout})
        )

    @property
    def address(self) -> str:
        return self._account.address

    @asynccontextmanager
    async def _rpc(self, method: str):
        """Translate web3/transport failures into the distributor taxonomy."""
        try:
            yield
        except ContractLogicError as e:
            raise ExecutionReverted(e.message or "execution reverted") from e
        except (Web3Exception, ValueError) as e:
            message = str(getattr(e, "message", None) or e)
            # Older nodes report reverts as plain RPC errors
            if "revert" in message.lower():
                raise ExecutionReverted(message) from e
            raise TransportError(method, message) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(method, str(e) or e.__class__.__name__) from e

    async def get_balance(self, address: Optional[str] = None) -> int:
        async with self._rpc("eth_getBalance"):
            return await self.w3.eth.get_balance(address or self.address)

    async def get_transaction_count(self, address: Optional[str] = None) -> int:
        async with self._rpc("eth_getTransactionCount"):
            return await self.w3.eth.get_transaction_count(address or self.address, "pending")

    async def get_gas_price(self) -> int:
        async with self._rpc("eth_gasPrice"):
            return await self.w3.eth.gas_price

    async def get_code(self, address: str) -> bytes:
        async with self._rpc("eth_getCode"):
            return bytes(await self.w3.eth.get_code(Web3.to_checksum_address(address)))

    async def call(self, tx: dict) -> bytes:
        async with self._rpc("eth_call"):
            return bytes(await self.w3.eth.call(tx))

    async def estimate_gas(self, tx: dict) -> int:
        async with self._rpc("eth_estimateGas"):
            return await self.w3.eth.estimate_gas(tx)

    async def send_transaction(self, request: TransactionRequest) -> str:
        try:
            signed_tx = self._account.sign_transaction(request.to_tx_params())
        except (TypeError, ValueError) as e:
            raise SubmissionFailed(f"Failed to sign transaction: {e}") from e

        async with self._rpc("eth_sendRawTransaction"):
            tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        return Web3.to_hex(tx_hash)

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        async with self._rpc("eth_getTransactionReceipt"):
            try:
                receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                return None

        return Receipt(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            status=receipt["status"],
            block_number=receipt["blockNumber"],
            gas_used=receipt["gasUsed"],
        )

    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        async with self._rpc("eth_getTransactionByHash"):
            try:
                return dict(await self.w3.eth.get_transaction(tx_hash))
            except TransactionNotFound:
                return None

    async def get_chain_id(self) -> int:
        async with self._rpc("eth_chainId"):
            return await self.w3.eth.chain_id

    async def get_block_number(self) -> int:
        async with self._rpc("eth_blockNumber"):
            return await self.w3.eth.block_number

    async def close(self) -> None:
        await self.w3.provider.disconnect()
