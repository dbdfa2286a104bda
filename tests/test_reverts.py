"""Tests for revert reason classification and ABI helpers."""

import pytest
from eth_abi import encode
from web3 import Web3

from rewards_distributor.contract.abi import (
    DISTRIBUTE_FUNCTION,
    decode_output,
    encode_call,
    function_signature,
)
from rewards_distributor.contract.reverts import RevertReason, classify_revert


class TestClassifyRevert:
    """Tests for classify_revert."""

    @pytest.mark.parametrize("raw,expected", [
        ("execution reverted: Ownable: caller is not the owner", RevertReason.ONLY_OWNER),
        ("Ownable: caller is not the owner", RevertReason.ONLY_OWNER),
        ("execution reverted: Pausable: paused", RevertReason.PAUSED),
        ("execution reverted: Too early to distribute", RevertReason.TOO_EARLY),
        ("execution reverted: Insufficient rewards", RevertReason.INSUFFICIENT_BALANCE),
        ("execution reverted: Not active", RevertReason.NOT_ACTIVE),
    ])
    def test_known_reasons(self, raw, expected):
        assert classify_revert(raw) == expected

    def test_owner_wins_over_later_patterns(self):
        raw = "Ownable: caller is not the owner (balance check skipped)"

        assert classify_revert(raw) == RevertReason.ONLY_OWNER

    def test_unmatched_returns_none(self):
        assert classify_revert("execution reverted: custom error 0x1234") is None
        assert classify_revert("") is None

    @pytest.mark.parametrize("raw", [
        "Connection timeout to host http://node:8545",
        "execution reverted: lock time not set",
        "execution reverted: balance snapshot pending",
    ])
    def test_loose_words_do_not_match(self, raw):
        assert classify_revert(raw) is None

    def test_descriptions_exist(self):
        for reason in RevertReason:
            assert reason.description


class TestAbi:
    """Tests for calldata encoding and return decoding."""

    def test_distribute_selector(self):
        expected = bytes(Web3.keccak(text="distributeDailyRewards()"))[:4]

        assert function_signature(DISTRIBUTE_FUNCTION) == "distributeDailyRewards()"
        assert encode_call(DISTRIBUTE_FUNCTION) == expected
        assert len(encode_call(DISTRIBUTE_FUNCTION)) == 4

    def test_decode_address_checksummed(self):
        data = encode(["address"], ["0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"])

        assert decode_output("owner", data) == "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

    def test_decode_uint_and_bool(self):
        assert decode_output("getRewardsPool", encode(["uint256"], [42])) == 42
        assert decode_output("paused", encode(["bool"], [True])) is True

    def test_decode_empty_result(self):
        with pytest.raises(ValueError):
            decode_output("isActive", b"")

    def test_unknown_function(self):
        with pytest.raises(ValueError):
            encode_call("withdrawAll")
