"""Remote-call capability used by the gateway.

The gateway never talks to a host directly. It is handed a
ContractDirectory that answers "is this a contract" and hands out
RemoteLedger capabilities. A RemoteLedger has a single call taking
``(token, amount, agent)`` and reports success or failure as a CallResult;
the gateway turns a failure into an abort of its own operation.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from cherry_core.exceptions import CherryException
from cherry_core.selectors import Selector


@dataclass(frozen=True, slots=True)
class CallResult:
    """Outcome of a remote call. Remote entry points return no value."""
    ok: bool
    error: Optional[CherryException] = None

    @classmethod
    def success(cls) -> "CallResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: CherryException) -> "CallResult":
        return cls(ok=False, error=error)


@runtime_checkable
class RemoteLedger(Protocol):
    """Deposit/withdraw entry points of a ledger at a fixed address."""

    address: str

    def call(self, selector: Selector, token: str, amount: int, agent: str) -> CallResult:
        ...


@runtime_checkable
class ContractDirectory(Protocol):
    """Answers address questions and issues remote-call capabilities."""

    def is_contract(self, address: str) -> bool:
        ...

    def remote_ledger(self, address: str, caller: Optional[str] = None) -> RemoteLedger:
        ...
