"""Tests for the ledger's selector-addressed entry points."""
from __future__ import annotations

import pytest

from cherry_core.exceptions import InsufficientAllowanceError, RoutingError
from cherry_core.selectors import (
    BRIDGE_IN_SELECTOR,
    DEPOSIT_SELECTOR,
    WITHDRAW_SELECTOR,
    Selector,
)
from cherry_escrow import LedgerEndpoint


@pytest.fixture
def endpoint(ledger):
    return LedgerEndpoint(ledger)


class TestLedgerEndpoint:
    def test_exposes_deposit_and_withdraw(self, endpoint):
        assert set(endpoint.entry_points) == {DEPOSIT_SELECTOR, WITHDRAW_SELECTOR}
        assert endpoint.address == "escrow"

    def test_deposit_selector_routes_to_deposit(self, endpoint, ledger):
        result = endpoint.dispatch(DEPOSIT_SELECTOR, "tokenA", 25, "X")

        assert result is None
        assert ledger.get_allowance("tokenA") == 125
        assert ledger.get_deposit("tokenA", "X") == 125

    def test_withdraw_selector_routes_to_withdraw(self, endpoint, ledger):
        endpoint.dispatch(WITHDRAW_SELECTOR, "tokenA", 40, "Y")

        assert ledger.get_allowance("tokenA") == 60
        assert ledger.get_withdraw("tokenA", "Y") == 60

    def test_unknown_selector(self, endpoint, ledger):
        with pytest.raises(RoutingError) as exc_info:
            endpoint.dispatch(BRIDGE_IN_SELECTOR, "tokenA", 1, "X")

        assert exc_info.value.selector == "0x01010101"
        assert ledger.get_allowance("tokenA") == 100

    def test_little_endian_tag_does_not_route(self, endpoint):
        with pytest.raises(RoutingError):
            endpoint.dispatch(Selector(bytes([240, 0, 0, 0])), "tokenA", 1, "X")

    def test_ledger_errors_propagate(self, endpoint):
        with pytest.raises(InsufficientAllowanceError):
            endpoint.dispatch(WITHDRAW_SELECTOR, "tokenA", 1000, "Y")

    def test_checkpoint_delegates(self, endpoint, ledger):
        snapshot = endpoint.checkpoint()
        endpoint.dispatch(DEPOSIT_SELECTOR, "tokenA", 1, "X")

        endpoint.restore(snapshot)

        assert ledger.get_allowance("tokenA") == 100
