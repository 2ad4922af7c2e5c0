"""Formatting of histories in the compact text form."""

from __future__ import annotations

from typing import Iterable

from txhistory.types import Transaction


def format_history(sessions: Iterable[Iterable[Transaction]]) -> str:
    """Format sessions as text: one transaction per line, sessions split by ``---``.

    The output ends with a newline whenever it is not empty.
    """
    blocks = ["".join(f"{txn}\n" for txn in session) for session in sessions]
    return "---\n".join(blocks)