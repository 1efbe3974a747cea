"""
Bridge and escrow events with an append-only event log.

Events are outputs only: the ledger and gateway never read them back. Each
event type has a fixed, ordered field list and a set of indexed topic
fields that off-chain observers filter on.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Generator, Iterator, Optional, Sequence, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Initiated:
    """Allowance entry seeded for a token."""
    name: ClassVar[str] = "Initiated"
    topic_fields: ClassVar[tuple[str, ...]] = ("token", "initial_value")

    token: str
    initial_value: int


@dataclass(frozen=True, slots=True)
class Deposited:
    """Amount added to a token's allowance by an agent."""
    name: ClassVar[str] = "Deposited"
    topic_fields: ClassVar[tuple[str, ...]] = ("token", "agent")

    token: str
    amount: int
    agent: str


@dataclass(frozen=True, slots=True)
class Withdrawn:
    """Amount taken from a token's allowance by an agent."""
    name: ClassVar[str] = "Withdrawn"
    topic_fields: ClassVar[tuple[str, ...]] = ("token", "agent")

    token: str
    amount: int
    agent: str


@dataclass(frozen=True, slots=True)
class BridgeIn:
    """Inbound transfer notification received by a gateway."""
    name: ClassVar[str] = "BridgeIn"
    topic_fields: ClassVar[tuple[str, ...]] = ("token", "recipient", "origin_chain")

    token: str
    recipient: str
    origin_chain: str
    amount: int


@dataclass(frozen=True, slots=True)
class BridgeOut:
    """Outbound transfer executed against a remote ledger."""
    name: ClassVar[str] = "BridgeOut"
    topic_fields: ClassVar[tuple[str, ...]] = ("token", "recipient", "agent")

    token: str
    recipient: str
    agent: str
    amount: int


BridgeEvent = Union[Initiated, Deposited, Withdrawn, BridgeIn, BridgeOut]

EVENT_TYPES: dict[str, type] = {
    cls.name: cls for cls in (Initiated, Deposited, Withdrawn, BridgeIn, BridgeOut)
}


def event_fields(event: BridgeEvent) -> tuple[tuple[str, Any], ...]:
    """Field name/value pairs in declaration order."""
    return tuple((f.name, getattr(event, f.name)) for f in fields(event))


def event_topics(event: BridgeEvent) -> tuple[Any, ...]:
    """Values of the indexed fields."""
    return tuple(getattr(event, name) for name in event.topic_fields)


@dataclass(frozen=True, slots=True)
class EventRecord:
    """An event as written to the log."""
    sequence: int
    emitter: str
    event: BridgeEvent
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def kind(self) -> str:
        return self.event.name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        # Balances can exceed JSON-safe integers, so amounts are rendered as strings
        payload = {
            name: str(value) if isinstance(value, int) else value
            for name, value in event_fields(self.event)
        }
        return {
            "sequence": self.sequence,
            "emitter": self.emitter,
            "kind": self.kind,
            "fields": payload,
            "topics": [str(t) for t in event_topics(self.event)],
            "recorded_at": self.recorded_at.isoformat(),
        }


EventListener = Callable[[EventRecord], None]


class EventLog:
    """
    Append-only event log.

    Records are only ever appended. checkpoint()/restore() exist for the
    contract host, which truncates back to a checkpoint when an invocation
    aborts so a failed call leaves no events behind.

    Inside deferred() listeners are not called on emit. Records are queued
    and delivered when the outermost deferred block exits; restore() drops
    queued records along with the truncated ones, so listeners only ever see
    committed events.
    """

    def __init__(self) -> None:
        self._records: list[EventRecord] = []
        self._next_sequence = 0
        self._listeners: list[EventListener] = []
        self._pending: list[EventRecord] = []
        self._defer_depth = 0

    def emit(self, emitter: str, event: BridgeEvent) -> EventRecord:
        record = EventRecord(sequence=self._next_sequence, emitter=emitter, event=event)
        self._records.append(record)
        self._next_sequence += 1
        logger.debug(f"Event {record.kind}#{record.sequence} from {emitter}")

        if self._defer_depth:
            self._pending.append(record)
        else:
            self._notify(record)
        return record

    @contextmanager
    def deferred(self) -> Generator[None, None, None]:
        """Hold listener notifications until the outermost block exits."""
        self._defer_depth += 1
        try:
            yield
        finally:
            self._defer_depth -= 1
            if not self._defer_depth:
                pending, self._pending = self._pending, []
                for record in pending:
                    self._notify(record)

    def _notify(self, record: EventRecord) -> None:
        for listener in self._listeners:
            try:
                listener(record)
            except Exception as e:
                logger.error(
                    f"Event listener {getattr(listener, '__name__', listener)} failed "
                    f"for {record.kind}: {e}",
                    exc_info=True,
                )

    def subscribe(self, listener: EventListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def records(
        self,
        kind: Optional[Union[str, type]] = None,
        emitter: Optional[str] = None,
    ) -> list[EventRecord]:
        """Records filtered by event kind (name or class) and emitter."""
        if isinstance(kind, type):
            kind = kind.name
        return [
            r for r in self._records
            if (kind is None or r.kind == kind) and (emitter is None or r.emitter == emitter)
        ]

    def events(self, kind: Optional[Union[str, type]] = None) -> list[BridgeEvent]:
        return [r.event for r in self.records(kind=kind)]

    def latest(self) -> Optional[EventRecord]:
        return self._records[-1] if self._records else None

    def checkpoint(self) -> int:
        return len(self._records)

    def restore(self, checkpoint: int) -> None:
        dropped = len(self._records) - checkpoint
        if dropped < 0:
            raise ValueError(f"Checkpoint {checkpoint} is ahead of the log")
        if dropped:
            del self._records[checkpoint:]
            self._next_sequence = checkpoint
            self._pending = [r for r in self._pending if r.sequence < checkpoint]
            logger.debug(f"Rolled back {dropped} event(s)")

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(tuple(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> EventRecord:
        return self._records[index]


def records_to_dicts(records: Sequence[EventRecord]) -> list[dict[str, Any]]:
    return [r.to_dict() for r in records]
