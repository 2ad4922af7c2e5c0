"""Random generation of coherent transactional histories."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from txhistory.types import Event, Transaction


@dataclass
class HistParams:
    """Parameters a history was generated with."""

    id: int = 0
    n_node: int = 0
    n_variable: int = 0
    n_transaction: int = 0
    n_event: int = 0


@dataclass
class History:
    """A generated history together with its parameters and timing."""

    params: HistParams
    info: str
    start: datetime
    end: datetime
    data: list[list[Transaction]] = field(default_factory=list)

    def duration(self) -> timedelta:
        return self.end - self.start


def generate_single_history(
    n_node: int, n_variable: int, n_transaction: int, n_event: int
) -> list[list[Transaction]]:
    """Generate ``n_node`` sessions of ``n_transaction`` transactions of ``n_event`` events.

    The first session starts with an extra transaction writing every variable
    at version 0. Every read observes the latest version written before its
    transaction began, so each read is backed by an existing write. All
    transactions are committed.

    Raises :class:`ValueError` if ``n_variable`` is zero.
    """
    if n_variable <= 0:
        raise ValueError("n_variable must be positive")

    counters: dict[int, int] = {}
    latest_writes = {variable: 0 for variable in range(n_variable)}
    sessions: list[list[Transaction]] = []

    for node in range(n_node):
        transactions: list[Transaction] = []
        if node == 0:
            transactions.append(
                Transaction.committed_of(Event.write(v, 0) for v in range(n_variable))
            )
        for _ in range(n_transaction):
            readable = dict(latest_writes)
            read_vars: set[int] = set()
            events = []
            for _ in range(n_event):
                variable = random.randrange(n_variable)
                want_read = random.random() < 0.5
                if want_read and variable not in read_vars:
                    read_vars.add(variable)
                    events.append(Event.read(variable, readable[variable]))
                else:
                    version = counters.get(variable, 0) + 1
                    counters[variable] = version
                    latest_writes[variable] = version
                    events.append(Event.write(variable, version))
            transactions.append(Transaction.committed_of(events))
        sessions.append(transactions)

    return sessions


def generate_mult_histories(
    n_hist: int, n_node: int, n_variable: int, n_transaction: int, n_event: int
) -> list[History]:
    """Generate ``n_hist`` independent histories, numbered from 0."""
    histories = []
    for hist_id in range(n_hist):
        start = datetime.now().astimezone()
        data = generate_single_history(n_node, n_variable, n_transaction, n_event)
        end = datetime.now().astimezone()
        params = HistParams(hist_id, n_node, n_variable, n_transaction, n_event)
        histories.append(History(params, "generated", start, end, data))
    return histories