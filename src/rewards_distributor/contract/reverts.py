"""Best-effort classification of revert messages.

Providers render reverts inconsistently, so classification is a substring
match on the raw error text. Unmatched messages are left to the caller to
surface verbatim.
"""

from enum import Enum
from typing import Optional


class RevertReason(str, Enum):
    """Known reasons the distribution call gets rejected."""

    ONLY_OWNER = "only_owner"
    PAUSED = "paused"
    TOO_EARLY = "too_early"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    NOT_ACTIVE = "not_active"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    RevertReason.ONLY_OWNER: "only the contract owner can call this function",
    RevertReason.PAUSED: "contract is paused",
    RevertReason.TOO_EARLY: "distribution interval not reached yet, try again later",
    RevertReason.INSUFFICIENT_BALANCE: "insufficient balance",
    RevertReason.NOT_ACTIVE: "contract is not active",
}

# Checked in order; first match wins
_PATTERNS: list[tuple[RevertReason, tuple[str, ...]]] = [
    (RevertReason.ONLY_OWNER, ("Ownable: caller is not the owner",)),
    (RevertReason.PAUSED, ("Pausable: paused",)),
    (RevertReason.TOO_EARLY, ("Too early", "too early")),
    (RevertReason.INSUFFICIENT_BALANCE, ("Insufficient", "insufficient balance")),
    (RevertReason.NOT_ACTIVE, ("Not active",)),
]


def classify_revert(raw_error: str) -> Optional[RevertReason]:
    """Map raw provider error text to a known revert reason.

    Args:
        raw_error: Error text as rendered by the provider

    Returns:
        Matching RevertReason, or None when nothing matches
    """
    for reason, needles in _PATTERNS:
        if any(needle in raw_error for needle in needles):
            return reason
    return None
