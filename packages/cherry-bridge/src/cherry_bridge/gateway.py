"""
Bridge gateway: inbound notifications and outbound transfers.

bridge_in re-emits an inbound transfer as a BridgeIn event addressed to the
gateway itself; it never touches ledger state.

bridge_out moves value through a remote ledger:
1. Reject recipients that are not contracts (no call, no event)
2. Resolve the action to the remote entry point's selector
3. Call the recipient synchronously with (token, amount, agent)
4. Emit BridgeOut only if the call succeeded

A failed remote call aborts the whole operation with RemoteCallFailure.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from cherry_core.events import BridgeIn, BridgeOut, EventLog
from cherry_core.exceptions import InvalidRecipientError, RemoteCallFailure, RoutingError
from cherry_core.selectors import BRIDGE_IN_SELECTOR, Selector
from cherry_core.validators import validate_amount, validate_identifier

from .actions import Action, ActionDispatcher
from .remote import ContractDirectory

logger = logging.getLogger(__name__)


class BridgeGateway:
    """
    Stateless bridge contract.

    Args:
        address: The gateway's own address; recipient of inbound transfers
        directory: Contract directory used to validate recipients and issue
            remote calls
        events: Event log to emit to
        dispatcher: Action -> selector resolver
    """

    def __init__(
        self,
        address: str,
        directory: ContractDirectory,
        events: Optional[EventLog] = None,
        dispatcher: Optional[ActionDispatcher] = None,
    ):
        self.address = validate_identifier(address, "address")
        self.directory = directory
        self.events = events if events is not None else EventLog()
        self.dispatcher = dispatcher or ActionDispatcher()

    def bridge_in(self, token: str, origin_chain: str, amount: int) -> BridgeIn:
        """Record an inbound transfer from origin_chain."""
        validate_identifier(token, "token")
        validate_identifier(origin_chain, "origin_chain")
        validate_amount(amount)

        event = BridgeIn(
            token=token,
            recipient=self.address,
            origin_chain=origin_chain,
            amount=amount,
        )
        self.events.emit(self.address, event)
        logger.info(f"Bridge-in {amount} {token} from {origin_chain} to {self.address}")
        return event

    def bridge_out(
        self,
        token: str,
        recipient: str,
        agent: str,
        amount: int,
        action: Action,
    ) -> BridgeOut:
        """
        Execute action on the recipient ledger and emit BridgeOut.

        Raises:
            InvalidRecipientError: recipient is not a contract
            RemoteCallFailure: the remote deposit/withdraw failed
        """
        validate_identifier(token, "token")
        validate_identifier(recipient, "recipient")
        validate_identifier(agent, "agent")
        validate_amount(amount)
        selector = self.dispatcher.resolve(action)

        if not self.directory.is_contract(recipient):
            logger.warning(f"Bridge-out to non-contract {recipient} refused")
            raise InvalidRecipientError(recipient)

        remote = self.directory.remote_ledger(recipient, caller=self.address)
        result = remote.call(selector, token, amount, agent)
        if not result.ok:
            failure = RemoteCallFailure(recipient, selector.hex, result.error)
            logger.error(f"Bridge-out {action.value} aborted: {failure.message}")
            raise failure from result.error

        event = BridgeOut(token=token, recipient=recipient, agent=agent, amount=amount)
        self.events.emit(self.address, event)
        logger.info(
            f"Bridge-out {action.value} {amount} {token} to {recipient} for {agent}"
        )
        return event

    def bridge_out_from_self(
        self,
        token: str,
        recipient: str,
        amount: int,
        action: Action,
    ) -> BridgeOut:
        """bridge_out with the gateway itself as the acting agent."""
        return self.bridge_out(token, recipient, self.address, amount, action)


class GatewayEndpoint:
    """Exposes a gateway's bridge_in at the fixed inbound selector."""

    def __init__(self, gateway: BridgeGateway):
        self.gateway = gateway
        self.entry_points: Mapping[Selector, Callable[..., Any]] = MappingProxyType({
            BRIDGE_IN_SELECTOR: gateway.bridge_in,
        })

    @property
    def address(self) -> str:
        return self.gateway.address

    def dispatch(self, selector: Selector, *args: Any, caller: Optional[str] = None) -> None:
        handler = self.entry_points.get(selector)
        if handler is None:
            raise RoutingError(self.address, selector.hex)
        handler(*args)

    # No storage to snapshot
    def checkpoint(self) -> None:
        return None

    def restore(self, snapshot: None) -> None:
        pass
