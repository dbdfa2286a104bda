"""Tests for network classification and policy."""

import pytest

from rewards_distributor.chains import (
    LOCAL_DEV_CHAIN_IDS,
    get_network_policy,
    is_local_development_network,
)

GWEI = 10**9


class TestNetworkClassification:
    """Tests for local/dev vs production classification."""

    @pytest.mark.parametrize("chain_id", sorted(LOCAL_DEV_CHAIN_IDS))
    def test_local_dev_ids(self, chain_id):
        assert is_local_development_network(chain_id)
        assert get_network_policy(chain_id).is_local_dev

    @pytest.mark.parametrize("chain_id", [1, 5, 56, 137, 8453, 11155111, 31338])
    def test_production_ids(self, chain_id):
        assert not is_local_development_network(chain_id)


class TestGasBuffer:
    """Gas limit buffering."""

    @pytest.mark.parametrize("chain_id", sorted(LOCAL_DEV_CHAIN_IDS))
    def test_local_multiplier(self, chain_id):
        policy = get_network_policy(chain_id)

        assert policy.buffer_gas(200_000) == 300_000
        assert policy.buffer_gas(1_000) == 1_500

    @pytest.mark.parametrize("chain_id", [1, 137, 11155111])
    def test_production_multiplier(self, chain_id):
        policy = get_network_policy(chain_id)

        assert policy.buffer_gas(200_000) == 240_000
        assert policy.buffer_gas(1_000) == 1_200


class TestPolicyConstants:
    """Timing and price constants per network class."""

    def test_local_constants(self):
        policy = get_network_policy(31337)

        assert policy.poll_interval == 1.0
        assert policy.confirmation_timeout == 60.0
        assert policy.default_gas_price == 20 * GWEI
        assert policy.adjust_gas_price(100 * GWEI) == 20 * GWEI

    def test_production_constants(self):
        policy = get_network_policy(1)

        assert policy.poll_interval == 5.0
        assert policy.confirmation_timeout == 300.0
        assert policy.default_gas_price == 30 * GWEI
        assert policy.adjust_gas_price(100 * GWEI) == 110 * GWEI
