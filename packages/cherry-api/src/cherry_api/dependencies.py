"""Shared dependency container for API routes."""
from __future__ import annotations

from dataclasses import dataclass

from cherry_bridge import BridgeGateway, ContractHost
from cherry_core import CherrySettings
from cherry_escrow import EscrowLedger


@dataclass
class Dependencies:
    """Runtime objects the routers operate on."""
    settings: CherrySettings
    host: ContractHost
    ledger: EscrowLedger
    gateway: BridgeGateway


def get_deps() -> Dependencies:
    """Dependency injection placeholder."""
    raise NotImplementedError("Must be overridden")
