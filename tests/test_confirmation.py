"""Tests for confirmation polling."""

import pytest

from rewards_distributor.chains import get_network_policy
from rewards_distributor.confirmation import ConfirmationTracker
from rewards_distributor.exceptions import ConfirmationTimeout, TransportError

TX_HASH = "0x" + "ab" * 32


def make_tracker(client, clock) -> ConfirmationTracker:
    return ConfirmationTracker(
        client, get_network_policy(client.chain_id), clock=clock, sleep=clock.sleep
    )


class TestConfirmationTracker:
    """Tests for ConfirmationTracker."""

    @pytest.mark.asyncio
    async def test_local_timeout_and_interval(self, local_client, fake_clock):
        """Local chains poll every second and give up after 60s."""
        tracker = make_tracker(local_client, fake_clock)
        start = fake_clock.now

        with pytest.raises(ConfirmationTimeout) as exc_info:
            await tracker.await_confirmation(TX_HASH)

        assert fake_clock.now - start == 60
        assert set(fake_clock.sleeps) == {1.0}
        assert len(fake_clock.sleeps) == 60
        assert exc_info.value.tx_hash == TX_HASH

    @pytest.mark.asyncio
    async def test_production_timeout_and_interval(self, mainnet_client, fake_clock):
        """Production chains poll every 5 seconds and give up after 300s."""
        tracker = make_tracker(mainnet_client, fake_clock)
        start = fake_clock.now

        with pytest.raises(ConfirmationTimeout):
            await tracker.await_confirmation(TX_HASH)

        assert fake_clock.now - start == 300
        assert set(fake_clock.sleeps) == {5.0}
        assert len(fake_clock.sleeps) == 60

    @pytest.mark.asyncio
    async def test_success_after_pending_polls(self, local_client, local_tracker, fake_clock, make_receipt):
        local_client.receipts = [None, None, make_receipt(status=1)]

        receipt = await local_tracker.await_confirmation(TX_HASH)

        assert receipt.succeeded
        assert receipt.block_number == 1235
        assert fake_clock.sleeps == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_failed_receipt_is_returned(self, local_client, local_tracker, make_receipt):
        """A reverted transaction is still a terminal result, not an error."""
        local_client.receipts = [make_receipt(status=0)]

        receipt = await local_tracker.await_confirmation(TX_HASH)

        assert receipt.status == 0
        assert not receipt.succeeded
        assert "get_transaction" in local_client.calls

    @pytest.mark.asyncio
    async def test_unexpected_status_is_failure(self, local_client, local_tracker, make_receipt):
        local_client.receipts = [make_receipt(status=2)]

        receipt = await local_tracker.await_confirmation(TX_HASH)

        assert not receipt.succeeded

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, local_client, fake_clock, rpc_down):
        async def broken_receipt(tx_hash):
            raise rpc_down("eth_getTransactionReceipt")

        local_client.get_transaction_receipt = broken_receipt
        tracker = make_tracker(local_client, fake_clock)

        with pytest.raises(TransportError):
            await tracker.await_confirmation(TX_HASH)
