"""
Cherry Bridge - selector-routed bridge gateway over remote escrow ledgers.

Example usage:

    from cherry_bridge import Action, ContractHost, deploy_escrow, deploy_gateway

    host = ContractHost()
    ledger = deploy_escrow(host, "escrow", initial_allowances={"tokenA": 100})
    gateway = deploy_gateway(host, "gateway")

    gateway.bridge_out("tokenA", "escrow", "agent_x", 25, Action.DEPOSIT)
    ledger.get_allowance("tokenA")   # 125
"""
from .actions import ROUTING_TABLE, Action, ActionDispatcher
from .deployment import deploy_escrow, deploy_from_settings, deploy_gateway
from .gateway import BridgeGateway, GatewayEndpoint
from .host import ContractHost, HostedRemoteLedger
from .remote import CallResult, ContractDirectory, RemoteLedger

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Actions
    "Action",
    "ActionDispatcher",
    "ROUTING_TABLE",
    # Remote calls
    "CallResult",
    "ContractDirectory",
    "RemoteLedger",
    # Host
    "ContractHost",
    "HostedRemoteLedger",
    # Gateway
    "BridgeGateway",
    "GatewayEndpoint",
    # Deployment
    "deploy_escrow",
    "deploy_from_settings",
    "deploy_gateway",
]
