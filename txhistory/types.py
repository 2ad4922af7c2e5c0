"""Core data types for transactional histories: events, transactions and identifiers."""

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable


class EventKind(enum.Enum):
    """Whether an event reads or writes a variable."""

    READ = "Read"
    WRITE = "Write"

    @property
    def rank(self) -> int:
        return 0 if self is EventKind.READ else 1


_COMPACT_TAGS = {"r": EventKind.READ, "w": EventKind.WRITE}


@functools.total_ordering
@dataclass(frozen=True)
class Event:
    """A single read or write of a variable.

    A read with ``version`` ``None`` observed the uninitialised value.
    """

    kind: EventKind
    variable: Hashable
    version: Any = None

    @classmethod
    def read(cls, variable: Hashable, version: Any) -> Event:
        return cls(EventKind.READ, variable, version)

    @classmethod
    def read_empty(cls, variable: Hashable) -> Event:
        return cls(EventKind.READ, variable, None)

    @classmethod
    def write(cls, variable: Hashable, version: Any) -> Event:
        if version is None:
            raise ValueError("a write must carry a version")
        return cls(EventKind.WRITE, variable, version)

    @property
    def is_read(self) -> bool:
        return self.kind is EventKind.READ

    @property
    def is_write(self) -> bool:
        return self.kind is EventKind.WRITE

    def _sort_key(self) -> tuple:
        return (self.kind.rank, self.variable, self.version is not None, self.version)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        if self._sort_key()[:3] != other._sort_key()[:3] or self.version is None:
            return self._sort_key()[:3] < other._sort_key()[:3]
        return self.version < other.version

    def __str__(self) -> str:
        if self.is_write:
            return f"{self.variable}:={self.version}"
        if self.version is None:
            return f"{self.variable}==?"
        return f"{self.variable}=={self.version}"

    def __repr__(self) -> str:
        if self.is_write:
            return f"{self.variable!r}<={self.version!r}"
        version = "?" if self.version is None else repr(self.version)
        return f"{self.variable!r}=>{version}"

    def to_json(self) -> dict:
        """Return the tagged JSON form, e.g. ``{"Write": {"variable": 0, "version": 1}}``."""
        return {self.kind.value: {"variable": self.variable, "version": self.version}}

    @classmethod
    def from_json(cls, data: Any) -> Event:
        """Build an event from its tagged form or the compact ``["r"|"w", var, ver]`` form."""
        if isinstance(data, (list, tuple)):
            return cls._from_compact(data)
        if isinstance(data, dict):
            return cls._from_tagged(data)
        raise ValueError(
            'expected an Event as tagged enum or compact tuple ["r"/"w", var, ver]'
        )

    @classmethod
    def _from_compact(cls, data: list | tuple) -> Event:
        if len(data) != 3:
            raise ValueError(f"invalid length {len(data)}, expected 3")
        tag, variable, version = data
        kind = _COMPACT_TAGS.get(tag)
        if kind is None:
            raise ValueError(f"unknown tag {tag!r}, expected 'r' or 'w'")
        if kind is EventKind.WRITE:
            return cls.write(variable, version)
        return cls(EventKind.READ, variable, version)

    @classmethod
    def _from_tagged(cls, data: dict) -> Event:
        if len(data) != 1:
            raise ValueError("expected exactly one of the keys Read or Write")
        (key, fields), = data.items()
        try:
            kind = EventKind(key)
        except ValueError:
            raise ValueError(f"unknown variant {key!r}, expected Read or Write") from None
        if not isinstance(fields, dict):
            raise ValueError(f"expected an object of fields for {key}")
        if "variable" not in fields:
            raise ValueError("missing field 'variable'")
        if kind is EventKind.WRITE:
            if "version" not in fields:
                raise ValueError("missing field 'version'")
            return cls.write(fields["variable"], fields["version"])
        return cls(EventKind.READ, fields["variable"], fields.get("version"))


@dataclass
class Transaction:
    """A sequence of events executed atomically, either committed or aborted."""

    events: list[Event] = field(default_factory=list)
    committed: bool = True

    @classmethod
    def committed_of(cls, events: Iterable[Event]) -> Transaction:
        return cls(list(events), True)

    @classmethod
    def uncommitted_of(cls, events: Iterable[Event]) -> Transaction:
        return cls(list(events), False)

    def __str__(self) -> str:
        body = " ".join(str(event) for event in self.events)
        return f"[{body}]" + ("" if self.committed else "!")

    def __repr__(self) -> str:
        body = ", ".join(repr(event) for event in self.events)
        return f"[{body}]" + ("" if self.committed else "!")

    def to_json(self) -> dict:
        return {
            "events": [event.to_json() for event in self.events],
            "committed": self.committed,
        }

    @classmethod
    def from_json(cls, data: Any) -> Transaction:
        if not isinstance(data, dict):
            raise ValueError("expected a Transaction object")
        try:
            events = data["events"]
            committed = data["committed"]
        except KeyError as missing:
            raise ValueError(f"missing field {missing.args[0]!r}") from None
        if not isinstance(committed, bool):
            raise ValueError("field 'committed' must be a boolean")
        return cls([Event.from_json(event) for event in events], committed)


Session = list  # an ordered list of Transaction objects from one client


@dataclass(frozen=True, order=True)
class TransactionId:
    """Identifies a transaction by session (1-based) and position in it (0-based).

    ``(0, 0)`` is the synthetic root that precedes every transaction.
    """

    session_id: int = 0
    session_height: int = 0

    @classmethod
    def root(cls) -> TransactionId:
        return cls(0, 0)


@dataclass(frozen=True, order=True)
class EventId:
    """Identifies an event by session, transaction and position in the transaction."""

    session_id: int
    session_height: int
    transaction_height: int

    def transaction_id(self) -> TransactionId:
        return TransactionId(self.session_id, self.session_height)


def sessions_to_json(sessions: Iterable[Iterable[Transaction]]) -> list:
    """Convert sessions to plain JSON-compatible lists."""
    return [[txn.to_json() for txn in session] for session in sessions]


def sessions_from_json(data: Any) -> list[list[Transaction]]:
    """Build sessions from their JSON form (a list of lists of transactions)."""
    if not isinstance(data, list):
        raise ValueError("expected a list of sessions")
    sessions = []
    for session in data:
        if not isinstance(session, list):
            raise ValueError("expected each session to be a list of transactions")
        sessions.append([Transaction.from_json(txn) for txn in session])
    return sessions