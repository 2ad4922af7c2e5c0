"""JSON-string entry points for the compact history text form."""

from __future__ import annotations

import json
from typing import Any

from txhistory.lexer import tokenize
from txhistory.parser import ParseError, parse_history
from txhistory.types import sessions_to_json

__all__ = ["parse_history_text", "tokenize_history"]


def _dumps(value: Any, sort_keys: bool = False) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, sort_keys=sort_keys)


def parse_history_text(text: str) -> str:
    """Parse the text form and return the sessions as a JSON string.

    On a parse failure the result is ``{"error": "<message>"}``.
    """
    try:
        sessions = parse_history(text)
    except ParseError as error:
        return _dumps({"error": str(error)})
    return _dumps(sessions_to_json(sessions))


def tokenize_history(text: str) -> str:
    """Tokenize the text form for highlighting.

    Returns a JSON array of ``{"end", "kind", "start", "text"}`` objects.
    """
    return _dumps(
        [
            {
                "kind": token.kind.value,
                "start": token.start,
                "end": token.end,
                "text": token.text(text),
            }
            for token in tokenize(text)
        ],
        sort_keys=True,
    )