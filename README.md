# txhistory

A small library for recorded transactional database histories. A history is
a list of sessions, each session a list of transactions, and each
transaction a list of read and write events.

## Modules

- `txhistory.types` – the data model.
  - `Event` is either a read or a write (`EventKind.READ` or
    `EventKind.WRITE`). Create one with `Event.read`, `Event.read_empty` or
    `Event.write`.
  - `Transaction` holds a list of events and a `committed` flag. Create one
    with `Transaction.committed_of` or `Transaction.uncommitted_of`.
  - `TransactionId` has `TransactionId.root()`, which is `(0, 0)`.
    `EventId.transaction_id()` gives the transaction an event belongs to.
  - `sessions_to_json` and `sessions_from_json` convert sessions to plain
    JSON data and back. `Event.from_json` reads both the tagged form
    (`{"Write": {"variable": 0, "version": 1}}`) and the compact form
    (`["w", 0, 1]`, `["r", 0, null]`). `Event.to_json` always writes the
    tagged form. Bad input raises `ValueError`.
- `txhistory.validation` – checks on a raw history. Each check raises a
  subclass of `txhistory.errors.HistoryError` for the first problem it finds.
  - `get_all_writes` maps every value that can be observed to the event that
    wrote it. It raises `SameVersionWrite` when two writes produce the same
    version of a variable.
  - `get_committed_writes` maps each committed transaction and variable to
    the last version that transaction wrote.
  - `consistent_local_reads` raises `IncompleteHistory` when a versioned read
    has no write behind it. It raises `InconsistentLocalRead` when a read is
    served by a write of its own transaction.
  - `committed_external_reads` raises `UncommittedWrite` when a read observes
    a write of an uncommitted transaction. It raises `OverwrittenRead` when a
    read observes a write that its own transaction later overwrote.
  - `is_valid_history` runs both of the checks above.
- `txhistory.errors` – the `HistoryError` hierarchy. Each error is a
  dataclass whose fields identify the events involved, and `to_json()`
  returns it in tagged JSON form.
- `txhistory.parser` – `parse_history` reads the text format into sessions.
  Variables come out as strings and versions as integers. Malformed input
  raises `ParseError`, which has a `line` and a `column`.
  `offset_to_line_col` converts an offset into a 1-based line and column.
- `txhistory.display` – `format_history` writes sessions in the text format,
  one transaction per line.
- `txhistory.lexer` – `tokenize` and `tokenize_with_text` split text into
  `Token`s of each `TokenKind`. Characters that form no token are skipped.
  This is meant for syntax highlighting.
- `txhistory.generator`
  - `generate_single_history` builds random histories in which every
    transaction is committed. The first session starts with a transaction
    that writes every variable at version 0. Every read observes the latest
    version written before its transaction began.
  - `generate_mult_histories` returns a list of `History` records. Each
    holds its `HistParams`, start and end times, and `duration()`.
- `txhistory.textapi` – `parse_history_text` returns the parsed sessions as
  a JSON string, or `{"error": "..."}` on a parse failure.
  `tokenize_history` returns a JSON array of tokens with `kind`, `start`,
  `end` and `text`.

## The text format

```text
// session 1
[x:=1 y:=1] [z==2 z:=3]
[y:=3]
---
// session 2
[a==1 b:=3] [c:=3]
[d==?]!
```

- `x:=1` writes version 1 of `x`.
- `x==1` reads version 1 of `x`.
- `x==?` reads the uninitialised value of `x`.
- A trailing `!` marks the transaction as uncommitted.
- A line of dashes separates sessions.
- `//` starts a comment line.
- Every line must end with a newline.

## Example

```python
from txhistory.display import format_history
from txhistory.errors import HistoryError
from txhistory.parser import parse_history
from txhistory.validation import is_valid_history

sessions = parse_history("[x:=1]\n---\n[x==1]\n")
try:
    is_valid_history(sessions)
except HistoryError as err:
    print("invalid:", err)

print(format_history(sessions), end="")
```

## What it does not do

- It does not decide whether a history meets a consistency level such as
  causal consistency, snapshot isolation or serializability.
- It does not connect to databases to record histories.
- It has no command-line program.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```