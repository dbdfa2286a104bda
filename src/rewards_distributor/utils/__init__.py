"""Utility modules for the rewards distributor."""

from rewards_distributor.utils.locks import RunGuard

__all__ = ["RunGuard"]
