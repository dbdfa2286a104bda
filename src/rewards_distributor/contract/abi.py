"""Rewards contract ABI and call encoding helpers.

Every function used here takes no arguments, so calldata is the bare 4-byte
selector.
"""

from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address


def _fn(name: str, outputs: list[str], mutability: str = "view") -> dict:
    return {
        "name": name,
        "type": "function",
        "inputs": [],
        "outputs": [{"name": "", "type": t} for t in outputs],
        "stateMutability": mutability,
    }


REWARDS_ABI = [
    _fn("distributeDailyRewards", [], "nonpayable"),
    _fn("isActive", ["bool"]),
    _fn("owner", ["address"]),
    _fn("lastDistributionTime", ["uint256"]),
    _fn("paused", ["bool"]),
    _fn("canDistribute", ["bool"]),
    _fn("getRewardsPool", ["uint256"]),
    _fn("totalRewards", ["uint256"]),
    _fn("rewardsPerDay", ["uint256"]),
]

_ABI_BY_NAME = {entry["name"]: entry for entry in REWARDS_ABI}

DISTRIBUTE_FUNCTION = "distributeDailyRewards"


def _get_entry(name: str) -> dict:
    try:
        return _ABI_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Unknown rewards contract function: {name}") from None


def function_signature(name: str) -> str:
    """Canonical signature, e.g. 'isActive()'."""
    entry = _get_entry(name)
    arg_types = ",".join(i["type"] for i in entry["inputs"])
    return f"{name}({arg_types})"


def encode_call(name: str) -> bytes:
    """Build calldata for a no-argument contract function."""
    return function_signature_to_4byte_selector(function_signature(name))


def decode_output(name: str, data: bytes) -> Any:
    """Decode the single return value of a view function."""
    output_types = [o["type"] for o in _get_entry(name)["outputs"]]
    if not output_types:
        return None

    try:
        (value,) = decode(output_types, data)
    except DecodingError as e:
        raise ValueError(f"Could not decode {name}() result: {e}") from e
    if output_types[0] == "address":
        return to_checksum_address(value)
    return value
