"""Parser for the compact history text form.

Grammar::

    history      = session (separator session)*
    separator    = WS? "-"+ WS? NEWLINE
    session      = (comment | blank_line | session_line)*
    comment      = "//" REST_OF_LINE NEWLINE
    session_line = WS? transaction (WS transaction)* WS? NEWLINE
    transaction  = "[" event (WS event)* "]" "!"?
    event        = variable ":=" version      (write)
                 | variable "==?"             (uninitialised read)
                 | variable "==" version      (read)

Only ``\\n`` ends a line, and every non-empty line must end with one.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from txhistory.types import Event, Transaction

__all__ = ["ParseError", "parse_history", "offset_to_line_col"]

_T = TypeVar("_T")

_MAX_VERSION = 2**64 - 1
_INLINE_WS = " \t"


class ParseError(ValueError):
    """Raised when text does not follow the history grammar.

    ``line`` and ``column`` are 1-based and point at where parsing stopped.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(message, line, column)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"parse error at line {self.line}, column {self.column}: {self.message}"


def offset_to_line_col(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into ``text`` to a 1-based ``(line, column)``."""
    prefix = text[: max(0, min(offset, len(text)))]
    line = prefix.count("\n") + 1
    last_newline = prefix.rfind("\n")
    column = len(prefix) + 1 if last_newline < 0 else len(prefix) - last_newline
    return line, column


class _Failure(Exception):
    """Internal signal that a grammar rule did not match."""

    def __init__(self, expected: str) -> None:
        super().__init__(expected)
        self.expected = expected


class _Parser:
    """Recursive-descent parser over a moving cursor.

    A failed rule leaves the cursor where it stopped; only the combinators
    that try alternatives or optional repetitions move it back.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # -- primitives ---------------------------------------------------------

    def _take_while(self, predicate: Callable[[str], bool], minimum: int, what: str) -> str:
        start = self.pos
        end = start
        text = self.text
        while end < len(text) and predicate(text[end]):
            end += 1
        if end - start < minimum:
            raise _Failure(f"expected {what}")
        self.pos = end
        return text[start:end]

    def _literal(self, token: str) -> None:
        if not self.text.startswith(token, self.pos):
            raise _Failure(f"expected {token!r}")
        self.pos += len(token)

    def _newline(self) -> None:
        self._literal("\n")

    def _inline_ws(self) -> None:
        self._take_while(lambda c: c in _INLINE_WS, 1, "whitespace")

    def _opt_inline_ws(self) -> None:
        self._take_while(lambda c: c in _INLINE_WS, 0, "whitespace")

    def _till_line_ending(self) -> None:
        self._take_while(lambda c: c not in "\r\n", 0, "end of line")

    def _alt(self, *branches: Callable[[], _T]) -> _T:
        start = self.pos
        failure: _Failure | None = None
        for branch in branches:
            self.pos = start
            try:
                return branch()
            except _Failure as exc:
                failure = exc
        assert failure is not None
        raise failure

    def _separated(self, item: Callable[[], _T], separator: Callable[[], None]) -> list[_T]:
        items = [item()]
        while True:
            checkpoint = self.pos
            try:
                separator()
                items.append(item())
            except _Failure:
                self.pos = checkpoint
                return items

    def _next_after_inline_ws(self) -> str:
        index = self.pos
        text = self.text
        while index < len(text) and text[index] in _INLINE_WS:
            index += 1
        return text[index] if index < len(text) else ""

    # -- leaves -------------------------------------------------------------

    def _variable(self) -> str:
        return self._take_while(lambda c: c.isalnum() or c == "_", 1, "a variable name")

    def _version(self) -> int:
        start = self.pos
        digits = self._take_while(lambda c: "0" <= c <= "9", 1, "a version number")
        value = int(digits)
        if value > _MAX_VERSION:
            self.pos = start
            raise _Failure("version number out of range")
        return value

    # -- events and transactions --------------------------------------------

    def _write_event(self) -> Event:
        variable = self._variable()
        self._literal(":=")
        return Event.write(variable, self._version())

    def _read_empty_event(self) -> Event:
        variable = self._variable()
        self._literal("==?")
        return Event.read_empty(variable)

    def _read_event(self) -> Event:
        variable = self._variable()
        self._literal("==")
        return Event.read(variable, self._version())

    def _event(self) -> Event:
        return self._alt(self._write_event, self._read_empty_event, self._read_event)

    def _transaction(self) -> Transaction:
        self._literal("[")
        events = self._separated(self._event, self._inline_ws)
        self._literal("]")
        if self.text.startswith("!", self.pos):
            self.pos += 1
            return Transaction.uncommitted_of(events)
        return Transaction.committed_of(events)

    # -- lines --------------------------------------------------------------

    def _comment_line(self) -> list[Transaction]:
        self._literal("//")
        self._till_line_ending()
        self._newline()
        return []

    def _blank_line(self) -> list[Transaction]:
        self._opt_inline_ws()
        self._newline()
        return []

    def _session_line(self) -> list[Transaction]:
        self._opt_inline_ws()
        transactions = self._separated(self._transaction, self._inline_ws)
        self._opt_inline_ws()
        self._newline()
        return transactions

    def _separator(self) -> None:
        self._opt_inline_ws()
        self._take_while(lambda c: c == "-", 1, "'-'")
        self._opt_inline_ws()
        self._newline()

    # -- sessions and history -----------------------------------------------

    def _session(self) -> list[Transaction]:
        transactions: list[Transaction] = []
        while self._next_after_inline_ws() not in ("-", ""):
            transactions.extend(
                self._alt(self._comment_line, self._blank_line, self._session_line)
            )
        return transactions

    def history(self) -> list[list[Transaction]]:
        sessions = [self._session()]
        while True:
            try:
                self._separator()
            except _Failure:
                break
            sessions.append(self._session())

        while True:
            checkpoint = self.pos
            try:
                self._blank_line()
            except _Failure:
                self.pos = checkpoint
                break

        if self.pos != len(self.text):
            raise _Failure("expected end of input")
        return sessions


def parse_history(text: str) -> list[list[Transaction]]:
    """Parse the compact text form into sessions of transactions.

    Variables come out as strings and versions as integers.
    Raises :class:`ParseError` when the text does not follow the grammar.
    """
    parser = _Parser(text)
    try:
        return parser.history()
    except _Failure as failure:
        line, column = offset_to_line_col(text, parser.pos)
        raise ParseError(failure.expected, line, column) from None