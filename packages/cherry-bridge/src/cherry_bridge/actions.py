"""Bridge-out actions and their routing tags.

Action is a closed set. The routing table is built once, at import, from an
exhaustive branch over every Action member; adding a member without a
branch fails at import time instead of routing somewhere by default.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, assert_never

from cherry_core.exceptions import CherryValidationError
from cherry_core.selectors import DEPOSIT_SELECTOR, WITHDRAW_SELECTOR, Selector


class Action(str, Enum):
    """Remote ledger operation a bridge-out invokes."""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


def _route(action: Action) -> Selector:
    if action is Action.DEPOSIT:
        return DEPOSIT_SELECTOR
    elif action is Action.WITHDRAW:
        return WITHDRAW_SELECTOR
    else:
        assert_never(action)


ROUTING_TABLE: Mapping[Action, Selector] = MappingProxyType({
    action: _route(action) for action in Action
})


class ActionDispatcher:
    """Resolves an Action to the selector of the remote entry point."""

    table: Mapping[Action, Selector] = ROUTING_TABLE

    def resolve(self, action: Action) -> Selector:
        if not isinstance(action, Action):
            raise CherryValidationError(
                f"Unknown bridge action: {action!r}",
                field="action",
            )
        return self.table[action]

    def action_for(self, selector: Selector) -> Optional[Action]:
        """Reverse lookup, None for selectors outside the table."""
        for action, candidate in self.table.items():
            if candidate == selector:
                return action
        return None
