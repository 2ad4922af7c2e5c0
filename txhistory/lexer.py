"""Tokenizer for the compact history text form, suited to syntax highlighting.

Sessions are separated by lines of dashes (``---``). Transactions sit in
brackets (``[...]``), writes use ``:=``, reads use ``==``, ``?`` marks an
uninitialised read and ``!`` marks an uncommitted transaction.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterator

__all__ = ["TokenKind", "Token", "tokenize", "tokenize_with_text"]


class TokenKind(enum.Enum):
    """Every kind of token the tokenizer produces."""

    COMMENT = "Comment"
    DASH = "Dash"
    BRACKET_OPEN = "BracketOpen"
    BRACKET_CLOSE = "BracketClose"
    COLON_EQUALS = "ColonEquals"
    DOUBLE_EQUALS = "DoubleEquals"
    QUESTION_MARK = "QuestionMark"
    BANG = "Bang"
    IDENT = "Ident"
    INTEGER = "Integer"
    NEWLINE = "Newline"
    WHITESPACE = "Whitespace"


_RULES: list[tuple[TokenKind, str]] = [
    (TokenKind.COMMENT, r"//[^\n]*"),
    (TokenKind.DASH, r"-+"),
    (TokenKind.BRACKET_OPEN, r"\["),
    (TokenKind.BRACKET_CLOSE, r"\]"),
    (TokenKind.COLON_EQUALS, r":="),
    (TokenKind.DOUBLE_EQUALS, r"=="),
    (TokenKind.QUESTION_MARK, r"\?"),
    (TokenKind.BANG, r"!"),
    (TokenKind.IDENT, r"[a-zA-Z_][a-zA-Z0-9_]*"),
    (TokenKind.INTEGER, r"[0-9]+"),
    (TokenKind.NEWLINE, r"\r?\n"),
    (TokenKind.WHITESPACE, r"[ \t]+"),
]

_PATTERN = re.compile("|".join(f"(?P<{kind.name}>{regex})" for kind, regex in _RULES))


@dataclass(frozen=True)
class Token:
    """A token kind with the ``start``/``end`` offsets of its text in the source."""

    kind: TokenKind
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    def text(self, source: str) -> str:
        """Return the slice of ``source`` this token covers."""
        return source[self.start : self.end]


def _scan(text: str) -> Iterator[Token]:
    pos = 0
    while pos < len(text):
        match = _PATTERN.match(text, pos)
        if match is None:
            # Unrecognised characters are skipped one at a time.
            pos += 1
            continue
        assert match.lastgroup is not None
        yield Token(TokenKind[match.lastgroup], match.start(), match.end())
        pos = match.end()


def tokenize(text: str) -> list[Token]:
    """Tokenize ``text``, silently skipping characters that form no token."""
    return list(_scan(text))


def tokenize_with_text(text: str) -> list[tuple[Token, str]]:
    """Tokenize ``text`` and pair each token with the text it covers."""
    return [(token, token.text(text)) for token in _scan(text)]