"""Sanity checks that a raw history must pass before it can be made atomic."""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Iterator, Sequence

from txhistory.errors import (
    InconsistentLocalRead,
    IncompleteHistory,
    OverwrittenRead,
    SameVersionWrite,
    UncommittedWrite,
)
from txhistory.types import Event, EventId, Transaction, TransactionId

_INIT_EVENT_ID = EventId(0, 0, 0)


def _events(
    sessions: Iterable[Sequence[Transaction]],
) -> Iterator[tuple[EventId, Transaction, Event]]:
    """Yield every event with its id; sessions are numbered from 1."""
    for session_id, session in enumerate(sessions, start=1):
        for session_height, transaction in enumerate(session):
            for transaction_height, event in enumerate(transaction.events):
                event_id = EventId(session_id, session_height, transaction_height)
                yield event_id, transaction, event


def get_all_writes(sessions: Iterable[Sequence[Transaction]]) -> dict[Event, EventId]:
    """Map each observable value (as a read event) to the event that produced it.

    Uninitialised reads map to the initial event ``(0, 0, 0)``. Writes of
    uncommitted transactions are included.

    Raises :class:`SameVersionWrite` if two writes produce the same version.
    """
    write_map: dict[Event, EventId] = {}
    for event_id, _, event in _events(sessions):
        if event.is_read:
            if event.version is None:
                write_map[event] = _INIT_EVENT_ID
            continue
        key = Event.read(event.variable, event.version)
        other = write_map.get(key)
        write_map[key] = event_id
        if other is not None:
            raise SameVersionWrite(event=event, ids=(event_id, other))
    return write_map


def get_committed_writes(
    sessions: Iterable[Sequence[Transaction]],
) -> dict[tuple[TransactionId, Hashable], tuple[Any, EventId]]:
    """Map each (committed transaction, variable) to its last written version and event."""
    write_map: dict[tuple[TransactionId, Hashable], tuple[Any, EventId]] = {}
    for event_id, transaction, event in _events(sessions):
        if transaction.committed and event.is_write:
            write_map[(event_id.transaction_id(), event.variable)] = (
                event.version,
                event_id,
            )
    return write_map


def consistent_local_reads(sessions: Sequence[Sequence[Transaction]]) -> None:
    """Check reads against writes of their own transaction.

    A versioned read must be backed by some write; a read served by a write of
    its own transaction is reported as inconsistent.

    Raises :class:`IncompleteHistory`, :class:`InconsistentLocalRead` or
    :class:`SameVersionWrite`.
    """
    all_writes = get_all_writes(sessions)
    for event_id, _, event in _events(sessions):
        if not event.is_read or event.version is None:
            continue
        write_event_id = all_writes.get(event)
        if write_event_id is None:
            raise IncompleteHistory(event=event, id=event_id)
        if write_event_id.transaction_id() == event_id.transaction_id():
            raise InconsistentLocalRead(
                read_event_id=event_id,
                write_event_id=write_event_id,
                read_event=event,
            )


def committed_external_reads(sessions: Sequence[Sequence[Transaction]]) -> None:
    """Check that every read observes the final write of a committed transaction.

    Raises :class:`IncompleteHistory`, :class:`OverwrittenRead`,
    :class:`UncommittedWrite` or :class:`SameVersionWrite`.
    """
    all_writes = get_all_writes(sessions)
    committed_writes = get_committed_writes(sessions)
    for event_id, _, event in _events(sessions):
        if not event.is_read:
            continue
        write_event_id = all_writes.get(event)
        if write_event_id is None:
            raise IncompleteHistory(event=event, id=event_id)
        committed = committed_writes.get((write_event_id.transaction_id(), event.variable))
        if committed is None:
            raise UncommittedWrite(
                read_event=event,
                read_event_id=event_id,
                write_event_id=write_event_id,
            )
        committed_version, committed_event_id = committed
        if write_event_id != committed_event_id:
            raise OverwrittenRead(
                read_event=event,
                read_event_id=event_id,
                overwritten_write_event_id=write_event_id,
                committed_write_event=Event.write(event.variable, committed_version),
                committed_write_event_id=committed_event_id,
            )


def is_valid_history(sessions: Sequence[Sequence[Transaction]]) -> None:
    """Run the local-read and committed-read checks, raising on the first violation."""
    consistent_local_reads(sessions)
    committed_external_reads(sessions)