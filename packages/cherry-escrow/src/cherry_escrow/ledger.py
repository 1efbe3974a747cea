"""
Escrow ledger: per-token allowances and agent deposit/withdraw records.

Pure accounting, no network calls. Every public mutation is a single atomic
transition: all preconditions are checked before the first table write, so a
failing call leaves the tables and the event log exactly as they were.

Tables:
    allowances  token -> balance
    deposits    (agent, token) -> allowance after that agent's last deposit
    withdrawals (agent, token) -> allowance after that agent's last withdrawal
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from cherry_core.config import ReinitializePolicy
from cherry_core.events import Deposited, EventLog, Initiated, Withdrawn
from cherry_core.exceptions import (
    BalanceOverflowError,
    InsufficientAllowanceError,
    TokenAlreadyInitializedError,
    UnauthorizedCallerError,
    UnknownTokenError,
)
from cherry_core.validators import MAX_BALANCE, validate_amount, validate_identifier

logger = logging.getLogger(__name__)

RecordKey = Tuple[str, str]


@dataclass(frozen=True)
class LedgerSnapshot:
    """Copy of the ledger tables taken by checkpoint()."""
    allowances: Dict[str, int]
    deposits: Dict[RecordKey, int]
    withdrawals: Dict[RecordKey, int]


class EscrowLedger:
    """
    Allowance table plus deposit/withdraw records for a set of tokens.

    Args:
        address: Address the ledger emits events from
        events: Event log to write to (a private log when omitted)
        reinitialize_policy: "reject" raises TokenAlreadyInitializedError when
            initialize() is called for a known token; "overwrite" re-seeds it
        authorized_callers: When set, only these callers may deposit/withdraw.
            None leaves both operations open to any caller.
    """

    def __init__(
        self,
        address: str = "escrow_ledger",
        events: Optional[EventLog] = None,
        reinitialize_policy: ReinitializePolicy = "reject",
        authorized_callers: Optional[Iterable[str]] = None,
    ):
        self.address = validate_identifier(address, "address")
        self.events = events if events is not None else EventLog()
        if reinitialize_policy not in ("reject", "overwrite"):
            raise ValueError(f"Unknown reinitialize policy: {reinitialize_policy}")
        self.reinitialize_policy = reinitialize_policy
        self.authorized_callers: Optional[FrozenSet[str]] = (
            frozenset(authorized_callers) if authorized_callers is not None else None
        )

        self._allowances: Dict[str, int] = {}
        self._deposits: Dict[RecordKey, int] = {}
        self._withdrawals: Dict[RecordKey, int] = {}

    @classmethod
    def with_allowance(cls, token: str, initial_value: int, **kwargs) -> "EscrowLedger":
        """Create a ledger seeded with a single token."""
        ledger = cls(**kwargs)
        ledger.initialize(token, initial_value)
        return ledger

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def initialize(self, token: str, initial_value: int) -> None:
        """Create the allowance entry for a token and emit Initiated."""
        validate_identifier(token, "token")
        validate_amount(initial_value, "initial_value")

        current = self._allowances.get(token)
        if current is not None:
            if self.reinitialize_policy == "reject":
                raise TokenAlreadyInitializedError(token, current)
            logger.warning(
                f"Re-seeding {token} on {self.address}: {current} -> {initial_value}"
            )

        self._allowances[token] = initial_value
        self.events.emit(self.address, Initiated(token=token, initial_value=initial_value))
        logger.info(f"Initialized {token} on {self.address} with allowance {initial_value}")

    def deposit(
        self,
        token: str,
        amount: int,
        depositor: str,
        caller: Optional[str] = None,
    ) -> None:
        """
        Add amount to the token's allowance on behalf of depositor.

        Raises:
            UnknownTokenError: Token was never initialized (aborts the invocation)
            BalanceOverflowError: Result exceeds the 128-bit ceiling
            UnauthorizedCallerError: Caller not on the allowlist
        """
        validate_identifier(token, "token")
        validate_amount(amount)
        validate_identifier(depositor, "depositor")
        self._check_caller(caller, "deposit")

        allowance = self._require_allowance(token)
        new_allowance = allowance + amount
        if new_allowance > MAX_BALANCE:
            raise BalanceOverflowError(token, allowance, amount)

        self._allowances[token] = new_allowance
        # The record holds the pool's resulting allowance, not this agent's
        # contribution. Downstream readers depend on that value; keep it.
        self._deposits[(depositor, token)] = new_allowance

        self.events.emit(self.address, Deposited(token=token, amount=amount, agent=depositor))
        logger.info(f"Deposit {amount} {token} by {depositor}: allowance {allowance} -> {new_allowance}")

    def withdraw(
        self,
        token: str,
        amount: int,
        withdrawer: str,
        caller: Optional[str] = None,
    ) -> None:
        """
        Take amount from the token's allowance on behalf of withdrawer.

        Raises:
            UnknownTokenError: Token was never initialized (aborts the invocation)
            InsufficientAllowanceError: amount exceeds the current allowance
            UnauthorizedCallerError: Caller not on the allowlist
        """
        validate_identifier(token, "token")
        validate_amount(amount)
        validate_identifier(withdrawer, "withdrawer")
        self._check_caller(caller, "withdraw")

        allowance = self._require_allowance(token)
        if amount > allowance:
            logger.warning(
                f"Withdrawal of {amount} {token} by {withdrawer} refused: allowance {allowance}"
            )
            raise InsufficientAllowanceError(token, amount, allowance)

        new_allowance = allowance - amount
        self._allowances[token] = new_allowance
        # Same convention as deposits: the resulting pool allowance
        self._withdrawals[(withdrawer, token)] = new_allowance

        self.events.emit(self.address, Withdrawn(token=token, amount=amount, agent=withdrawer))
        logger.info(f"Withdraw {amount} {token} by {withdrawer}: allowance {allowance} -> {new_allowance}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_allowance(self, token: str) -> Optional[int]:
        return self._allowances.get(token)

    def get_deposit(self, token: str, agent: str) -> Optional[int]:
        return self._deposits.get((agent, token))

    def get_withdraw(self, token: str, agent: str) -> Optional[int]:
        return self._withdrawals.get((agent, token))

    def tokens(self) -> list[str]:
        return sorted(self._allowances)

    def is_initialized(self, token: str) -> bool:
        return token in self._allowances

    # ------------------------------------------------------------------
    # Host rollback support
    # ------------------------------------------------------------------

    def checkpoint(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            allowances=dict(self._allowances),
            deposits=dict(self._deposits),
            withdrawals=dict(self._withdrawals),
        )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self._allowances = dict(snapshot.allowances)
        self._deposits = dict(snapshot.deposits)
        self._withdrawals = dict(snapshot.withdrawals)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_allowance(self, token: str) -> int:
        allowance = self._allowances.get(token)
        if allowance is None:
            logger.error(f"Unknown token {token} on {self.address}")
            raise UnknownTokenError(token)
        return allowance

    def _check_caller(self, caller: Optional[str], operation: str) -> None:
        if self.authorized_callers is None:
            return
        if caller not in self.authorized_callers:
            logger.warning(f"Rejected {operation} from {caller} on {self.address}")
            raise UnauthorizedCallerError(caller, operation)
