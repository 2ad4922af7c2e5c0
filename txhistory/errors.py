"""Errors raised when a raw history cannot be turned into an atomic one."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, ClassVar

from txhistory.types import Event, EventId


def _field_to_json(value: Any) -> Any:
    if isinstance(value, Event):
        return value.to_json()
    if isinstance(value, EventId):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_field_to_json(item) for item in value]
    return value


class HistoryError(Exception):
    """Base class for violations found in a raw history."""

    description: ClassVar[str] = "invalid history"

    def to_json(self) -> dict:
        """Return the externally tagged JSON form of this error."""
        body = {f.name: _field_to_json(getattr(self, f.name)) for f in fields(self)}
        return {type(self).__name__: body}

    def __str__(self) -> str:
        details = ", ".join(f"{f.name}={getattr(self, f.name)!r}" for f in fields(self))
        return f"{type(self).__name__}: {self.description} ({details})"


@dataclass(eq=True)
class IncompleteHistory(HistoryError):
    """A read observed a value that no event wrote."""

    description: ClassVar[str] = "read of an absent value"
    event: Event
    id: EventId


@dataclass(eq=True)
class SameVersionWrite(HistoryError):
    """Two different events wrote the same version of a variable."""

    description: ClassVar[str] = "different events wrote the same version"
    event: Event
    ids: tuple[EventId, EventId]


@dataclass(eq=True)
class InconsistentLocalRead(HistoryError):
    """A read inside a transaction disagrees with that transaction's own writes."""

    description: ClassVar[str] = "inconsistent read of a local write"
    read_event_id: EventId
    write_event_id: EventId
    read_event: Event


@dataclass(eq=True)
class UnsuccessfulEventRead(HistoryError):
    """A read observed a failed event."""

    description: ClassVar[str] = "read of a failed event"
    read_event: Event
    read_event_id: EventId
    write_event: Event
    write_event_id: EventId


@dataclass(eq=True)
class UnsuccessfulTransactionRead(HistoryError):
    """A read observed a write of an aborted transaction."""

    description: ClassVar[str] = "read of a write from an aborted transaction"
    read_event: Event
    read_event_id: EventId
    write_event: Event
    write_event_id: EventId


@dataclass(eq=True)
class NonRepeatableRead(HistoryError):
    """A transaction read two different writes from two committed transactions."""

    description: ClassVar[str] = "non-repeatable read"
    read_event: Event
    read_event_id: EventId
    write_event_ids: tuple[EventId, EventId]


@dataclass(eq=True)
class OverwrittenRead(HistoryError):
    """A read observed a write overwritten within its committed transaction."""

    description: ClassVar[str] = "read of an overwritten write"
    read_event: Event
    read_event_id: EventId
    overwritten_write_event_id: EventId
    committed_write_event: Event
    committed_write_event_id: EventId


@dataclass(eq=True)
class UncommittedWrite(HistoryError):
    """A read observed a write of an uncommitted transaction."""

    description: ClassVar[str] = "read of an uncommitted write"
    read_event: Event
    read_event_id: EventId
    write_event_id: EventId