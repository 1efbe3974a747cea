"""
In-memory contract host.

Stands in for the chain runtime the ledger and gateway are deployed on:
- keeps the address -> contract registry (is_contract)
- routes selector-addressed calls into a contract's entry points
- serializes invocations and makes each one atomic: contract tables, the
  registry and the shared event log are checkpointed before the call and
  restored if it raises. Listeners see the call's events only once the
  outermost invocation or transaction has committed

Contracts hosted here expose ``address``, ``entry_points``,
``dispatch(selector, *args, caller=...)``, ``checkpoint()`` and
``restore(snapshot)``.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, Iterable, List, Mapping, Optional, Protocol, Tuple

from cherry_core.events import EventLog
from cherry_core.exceptions import CherryException, ContractNotFoundError, ContractTrapped
from cherry_core.logging_config import reset_contract_context, set_contract_context
from cherry_core.selectors import Selector
from cherry_core.validators import validate_identifier

from .remote import CallResult

logger = logging.getLogger(__name__)


class HostedContract(Protocol):
    address: str
    entry_points: Mapping[Selector, Callable[..., Any]]

    def dispatch(self, selector: Selector, *args: Any, caller: Optional[str] = None) -> None:
        ...

    def checkpoint(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> None:
        ...


class ContractHost:
    """Registry and call router for in-memory contracts."""

    def __init__(self, events: Optional[EventLog] = None):
        self.events = events if events is not None else EventLog()
        self._contracts: Dict[str, HostedContract] = {}

    def deploy(self, contract: HostedContract) -> HostedContract:
        """Register a contract at its address."""
        address = validate_identifier(contract.address, "address")
        if address in self._contracts:
            raise ValueError(f"A contract is already deployed at {address}")
        self._contracts[address] = contract
        logger.info(
            f"Deployed {type(contract).__name__} at {address} "
            f"with {len(contract.entry_points)} entry point(s)"
        )
        return contract

    def is_contract(self, address: str) -> bool:
        return address in self._contracts

    def contracts(self) -> List[str]:
        return sorted(self._contracts)

    def get(self, address: str) -> HostedContract:
        contract = self._contracts.get(address)
        if contract is None:
            raise ContractNotFoundError(address)
        return contract

    def invoke(
        self,
        callee: str,
        selector: Selector,
        *args: Any,
        caller: Optional[str] = None,
    ) -> None:
        """
        Call the entry point addressed by selector on callee.

        Raises whatever CherryException the callee raises, after restoring
        the callee's tables and the event log. Any other exception from the
        callee is re-raised as ContractTrapped.
        """
        contract = self.get(callee)
        with self._checkpointed([contract]):
            token = set_contract_context(callee)
            try:
                contract.dispatch(selector, *args, caller=caller)
            except CherryException:
                raise
            except Exception as e:
                logger.error(f"Contract {callee} trapped in {selector}: {e!r}")
                raise ContractTrapped(callee, selector.hex, type(e).__name__) from e
            finally:
                reset_contract_context(token)

    @contextmanager
    def transaction(self) -> Generator["ContractHost", None, None]:
        """Run a block as one invocation; any exception rolls back every contract."""
        with self._checkpointed(list(self._contracts.values())):
            yield self

    def remote_ledger(self, address: str, caller: Optional[str] = None) -> "HostedRemoteLedger":
        return HostedRemoteLedger(self, address, caller)

    @contextmanager
    def _checkpointed(self, contracts: Iterable[HostedContract]) -> Generator[None, None, None]:
        snapshots: List[Tuple[HostedContract, Any]] = [(c, c.checkpoint()) for c in contracts]
        registry = dict(self._contracts)
        log_checkpoint = self.events.checkpoint()
        with self.events.deferred():
            try:
                yield
            except BaseException:
                for contract, snapshot in snapshots:
                    contract.restore(snapshot)
                self._contracts = registry
                self.events.restore(log_checkpoint)
                logger.debug(f"Rolled back {len(snapshots)} contract(s) after aborted invocation")
                raise


class HostedRemoteLedger:
    """RemoteLedger capability backed by a ContractHost."""

    def __init__(self, host: ContractHost, address: str, caller: Optional[str] = None):
        self._host = host
        self.address = address
        self.caller = caller

    def call(self, selector: Selector, token: str, amount: int, agent: str) -> CallResult:
        try:
            self._host.invoke(self.address, selector, token, amount, agent, caller=self.caller)
        except CherryException as e:
            logger.info(f"Remote call {selector} on {self.address} failed: {e.error_code}")
            return CallResult.failure(e)
        return CallResult.success()
