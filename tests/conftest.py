"""Pytest configuration and fixtures."""

from typing import Optional

import pytest
from eth_abi import encode

from rewards_distributor.chain.base import ChainClient
from rewards_distributor.chains import get_network_policy
from rewards_distributor.confirmation import ConfirmationTracker
from rewards_distributor.contract.abi import REWARDS_ABI, encode_call
from rewards_distributor.contract.gateway import ContractGateway
from rewards_distributor.exceptions import ExecutionReverted, TransportError
from rewards_distributor.models import GasPolicy, Receipt, TransactionRequest

# Hardhat default account #0
SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

TX_HASH = "0x" + "ab" * 32
GWEI = 10**9

_SELECTORS = {encode_call(entry["name"]): entry for entry in REWARDS_ABI}


class FakeChainClient(ChainClient):
    """In-memory ChainClient with programmable failures.

    Every call is recorded in `calls` so tests can assert ordering.
    """

    tx_hash = TX_HASH

    def __init__(self, chain_id: int = 31337):
        self.chain_id = chain_id
        self.calls: list[str] = []

        self.views: dict = {
            "isActive": True,
            "owner": SIGNER_ADDRESS,
            "lastDistributionTime": 1_700_000_000,
            "paused": False,
            "canDistribute": True,
            "getRewardsPool": 10**21,
            "totalRewards": 10**22,
            "rewardsPerDay": 10**20,
        }
        self.failing_views: set[str] = set()

        self.balance = 10**18
        self.nonce = 7
        self.gas_price = 100 * GWEI
        self.gas_price_error: Optional[Exception] = None
        self.gas_estimate = 200_000
        self.estimate_error: Optional[Exception] = None
        self.simulation_error: Optional[Exception] = None
        self.send_error: Optional[Exception] = None
        self.code = b"\x60\x80\x60\x40"
        self.block_number = 1234

        self.receipts: list[Optional[Receipt]] = []
        self.sent: list[TransactionRequest] = []
        self.simulated: list[dict] = []

    @property
    def address(self) -> str:
        return SIGNER_ADDRESS

    async def get_balance(self, address=None) -> int:
        self.calls.append("get_balance")
        return self.balance

    async def get_transaction_count(self, address=None) -> int:
        self.calls.append("get_transaction_count")
        return self.nonce

    async def get_gas_price(self) -> int:
        self.calls.append("get_gas_price")
        if self.gas_price_error:
            raise self.gas_price_error
        return self.gas_price

    async def get_code(self, address: str) -> bytes:
        self.calls.append("get_code")
        return self.code

    async def call(self, tx: dict) -> bytes:
        entry = _SELECTORS[bytes(tx["data"][:4])]
        name = entry["name"]

        if name == "distributeDailyRewards":
            self.calls.append("simulate")
            self.simulated.append(tx)
            if self.simulation_error:
                raise self.simulation_error
            return b""

        self.calls.append(f"view:{name}")
        if name in self.failing_views or name not in self.views:
            raise ExecutionReverted("execution reverted")
        types = [o["type"] for o in entry["outputs"]]
        return encode(types, [self.views[name]])

    async def estimate_gas(self, tx: dict) -> int:
        self.calls.append("estimate_gas")
        if self.estimate_error:
            raise self.estimate_error
        return self.gas_estimate

    async def send_transaction(self, request: TransactionRequest) -> str:
        self.calls.append("send_transaction")
        if self.send_error:
            raise self.send_error
        self.sent.append(request)
        return self.tx_hash

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        self.calls.append("get_transaction_receipt")
        if self.receipts:
            return self.receipts.pop(0)
        return None

    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        self.calls.append("get_transaction")
        return {"hash": tx_hash, "nonce": self.nonce}

    async def get_chain_id(self) -> int:
        return self.chain_id

    async def get_block_number(self) -> int:
        return self.block_number


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def make_client():
    """Factory for fake clients on an arbitrary chain id."""
    return FakeChainClient


@pytest.fixture
def make_receipt():
    """Factory for receipts of the fake transaction."""
    def _make_receipt(status: int = 1, block_number: int = 1235) -> Receipt:
        return Receipt(tx_hash=TX_HASH, status=status, block_number=block_number, gas_used=150_000)
    return _make_receipt


@pytest.fixture
def rpc_down():
    """Factory for endpoint-unreachable transport errors."""
    def _rpc_down(method: str = "eth_gasPrice") -> TransportError:
        return TransportError(method, "connection refused")
    return _rpc_down


@pytest.fixture
def local_client() -> FakeChainClient:
    """Fake client on a Hardhat chain id."""
    return FakeChainClient(chain_id=31337)


@pytest.fixture
def mainnet_client() -> FakeChainClient:
    """Fake client on Ethereum mainnet."""
    return FakeChainClient(chain_id=1)


@pytest.fixture
def local_gateway(local_client) -> ContractGateway:
    return ContractGateway(local_client, CONTRACT_ADDRESS, chain_id=31337)


@pytest.fixture
def mainnet_gateway(mainnet_client) -> ContractGateway:
    return ContractGateway(mainnet_client, CONTRACT_ADDRESS, chain_id=1, gas_policy=GasPolicy())


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def local_tracker(local_client, fake_clock) -> ConfirmationTracker:
    return ConfirmationTracker(
        local_client, get_network_policy(31337), clock=fake_clock, sleep=fake_clock.sleep
    )
