"""Selector-addressed entry points of the escrow ledger.

The contract host routes remote calls here. Each selector in the published
registry maps to one ledger method taking ``(token, amount, agent)``.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from cherry_core.exceptions import RoutingError
from cherry_core.selectors import DEPOSIT_SELECTOR, WITHDRAW_SELECTOR, Selector

from .ledger import EscrowLedger, LedgerSnapshot

logger = logging.getLogger(__name__)


class LedgerEndpoint:
    """Exposes an EscrowLedger to the contract host."""

    def __init__(self, ledger: EscrowLedger):
        self.ledger = ledger
        self.entry_points: Mapping[Selector, Callable[..., Any]] = MappingProxyType({
            DEPOSIT_SELECTOR: self._deposit,
            WITHDRAW_SELECTOR: self._withdraw,
        })

    @property
    def address(self) -> str:
        return self.ledger.address

    def dispatch(self, selector: Selector, *args: Any, caller: Optional[str] = None) -> None:
        """Invoke the entry point for selector. Returns nothing."""
        handler = self.entry_points.get(selector)
        if handler is None:
            raise RoutingError(self.address, selector.hex)
        logger.debug(f"{self.address} dispatching {selector} from {caller}")
        handler(*args, caller=caller)

    def _deposit(self, token: str, amount: int, agent: str, caller: Optional[str] = None) -> None:
        self.ledger.deposit(token, amount, agent, caller=caller)

    def _withdraw(self, token: str, amount: int, agent: str, caller: Optional[str] = None) -> None:
        self.ledger.withdraw(token, amount, agent, caller=caller)

    def checkpoint(self) -> LedgerSnapshot:
        return self.ledger.checkpoint()

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self.ledger.restore(snapshot)
