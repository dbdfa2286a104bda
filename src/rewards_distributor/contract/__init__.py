"""Rewards contract access.

- ContractGateway: pre-flight, simulation, gas policy and submission
- classify_revert: revert text -> RevertReason
"""

from rewards_distributor.contract.gateway import ContractGateway
from rewards_distributor.contract.reverts import RevertReason, classify_revert

__all__ = ["ContractGateway", "RevertReason", "classify_revert"]
