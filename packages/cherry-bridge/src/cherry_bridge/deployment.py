"""Helpers that deploy the escrow ledger and gateway onto a ContractHost."""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from cherry_core.config import CherrySettings, ReinitializePolicy
from cherry_escrow import EscrowLedger, LedgerEndpoint

from .gateway import BridgeGateway, GatewayEndpoint
from .host import ContractHost


def deploy_escrow(
    host: ContractHost,
    address: str,
    initial_allowances: Optional[Mapping[str, int]] = None,
    reinitialize_policy: ReinitializePolicy = "reject",
    authorized_callers: Optional[Iterable[str]] = None,
) -> EscrowLedger:
    """Deploy an escrow ledger sharing the host's event log."""
    ledger = EscrowLedger(
        address=address,
        events=host.events,
        reinitialize_policy=reinitialize_policy,
        authorized_callers=authorized_callers,
    )
    host.deploy(LedgerEndpoint(ledger))
    for token, value in (initial_allowances or {}).items():
        ledger.initialize(token, value)
    return ledger


def deploy_gateway(host: ContractHost, address: str) -> BridgeGateway:
    """Deploy a gateway that resolves recipients through the host."""
    gateway = BridgeGateway(address=address, directory=host, events=host.events)
    host.deploy(GatewayEndpoint(gateway))
    return gateway


def deploy_from_settings(
    settings: CherrySettings,
    host: Optional[ContractHost] = None,
) -> tuple[ContractHost, EscrowLedger, BridgeGateway]:
    """Build a host with one ledger and one gateway as configured."""
    host = host or ContractHost()
    ledger = deploy_escrow(
        host,
        settings.escrow_address,
        initial_allowances=settings.initial_allowances,
        reinitialize_policy=settings.reinitialize_policy,
        authorized_callers=settings.caller_allowlist,
    )
    gateway = deploy_gateway(host, settings.gateway_address)
    return host, ledger, gateway
