import json

import pytest

from txhistory.errors import (
    HistoryError,
    IncompleteHistory,
    NonRepeatableRead,
    OverwrittenRead,
    SameVersionWrite,
    UncommittedWrite,
)
from txhistory.types import Event, EventId


def _raise(error):
    raise error


def test_incomplete_history_is_raisable_and_keeps_fields():
    event_id = EventId(3, 0, 0)
    with pytest.raises(HistoryError) as info:
        _raise(IncompleteHistory(event=Event.read("a", 1), id=event_id))
    assert info.value.event == Event.read("a", 1)
    assert info.value.id == event_id


def test_incomplete_history_json_shape():
    err = IncompleteHistory(event=Event.read("a", 1), id=EventId(3, 0, 0))
    assert err.to_json() == {
        "IncompleteHistory": {
            "event": {"Read": {"variable": "a", "version": 1}},
            "id": {"session_id": 3, "session_height": 0, "transaction_height": 0},
        }
    }


def test_same_version_write_ids_become_list():
    ids = (EventId(1, 0, 0), EventId(2, 0, 0))
    body = SameVersionWrite(event=Event.write("x", 1), ids=ids).to_json()["SameVersionWrite"]
    assert body["ids"] == [
        {"session_id": 1, "session_height": 0, "transaction_height": 0},
        {"session_id": 2, "session_height": 0, "transaction_height": 0},
    ]


def test_json_is_serializable_and_tagged_by_class():
    err = OverwrittenRead(
        read_event=Event.read("a", 0),
        read_event_id=EventId(2, 0, 0),
        overwritten_write_event_id=EventId(1, 0, 0),
        committed_write_event=Event.write("a", 1),
        committed_write_event_id=EventId(1, 0, 1),
    )
    decoded = json.loads(json.dumps(err.to_json()))
    assert list(decoded) == ["OverwrittenRead"]
    assert Event.from_json(decoded["OverwrittenRead"]["committed_write_event"]) == Event.write("a", 1)


def test_equality_of_errors():
    a = UncommittedWrite(Event.read("a", 0), EventId(2, 0, 0), EventId(1, 0, 0))
    b = UncommittedWrite(Event.read("a", 0), EventId(2, 0, 0), EventId(1, 0, 0))
    c = UncommittedWrite(Event.read("a", 0), EventId(2, 0, 0), EventId(1, 0, 1))
    assert a == b
    assert not a == c


def test_str_names_the_error_kind():
    err = NonRepeatableRead(
        read_event=Event.read("x", 1),
        read_event_id=EventId(1, 0, 1),
        write_event_ids=(EventId(2, 0, 0), EventId(3, 0, 0)),
    )
    assert str(err).startswith("NonRepeatableRead")