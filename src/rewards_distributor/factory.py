"""Factory for wiring the distribution components from settings."""

from dataclasses import dataclass
from typing import Optional

from rewards_distributor.chain.base import ChainClient
from rewards_distributor.chain.client import Web3ChainClient
from rewards_distributor.config import Settings, get_settings
from rewards_distributor.confirmation import ConfirmationTracker
from rewards_distributor.contract.gateway import ContractGateway
from rewards_distributor.diagnostics import ContractDiagnostics
from rewards_distributor.scheduler import DistributionJob


@dataclass
class Components:
    """Everything one process needs, sharing a single client."""
    client: ChainClient
    gateway: ContractGateway
    tracker: ConfirmationTracker
    job: DistributionJob
    diagnostics: ContractDiagnostics


def create_components(
    settings: Optional[Settings] = None,
    client: Optional[ChainClient] = None,
) -> Components:
    """Build the component graph.

    Args:
        settings: Settings to use (defaults to get_settings())
        client: Chain client to use (defaults to a Web3ChainClient)

    Raises:
        ConfigurationError: If settings are invalid
    """
    settings = settings or get_settings()

    if client is None:
        client = Web3ChainClient(
            rpc_url=settings.rpc_url,
            private_key=settings.private_key.get_secret_value().strip(),
        )

    gateway = ContractGateway(
        client=client,
        contract_address=settings.contract_address,
        chain_id=settings.chain_id,
        gas_policy=settings.gas_policy,
        preflight_mode=settings.preflight_mode,
    )
    tracker = ConfirmationTracker(client, gateway.policy)
    job = DistributionJob(gateway, tracker)

    return Components(
        client=client,
        gateway=gateway,
        tracker=tracker,
        job=job,
        diagnostics=ContractDiagnostics(gateway, tracker, guard=job.guard),
    )
