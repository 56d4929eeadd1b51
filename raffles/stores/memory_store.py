"""In-process implementation of the RaffleStore.

Useful for tests and for running the drawing core without a database. All
state sits behind one re-entrant lock; ``atomic`` snapshots the state and
restores it when the block raises, so partial writes are never visible.
"""

import threading
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from typing import Any

from raffles.domain import (
    DrawLogEntry,
    DrawResult,
    Organizer,
    OrganizerId,
    PlatformSettings,
    Raffle,
    RaffleId,
    Ticket,
    TicketId,
)
from raffles.stores.interfaces import PersistenceError, PersistenceTimeout, RaffleStore


class InMemoryRaffleStore(RaffleStore):
    """Thread-safe dictionary-backed raffle store."""

    def __init__(
        self,
        settings: PlatformSettings | None = None,
        lock_timeout: float | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._lock_timeout = lock_timeout
        self._settings = settings or PlatformSettings()
        self._organizers: dict[OrganizerId, Organizer] = {}
        self._raffles: dict[RaffleId, Raffle] = {}
        self._tickets: dict[TicketId, Ticket] = {}
        self._draw_log: defaultdict[RaffleId, list[DrawLogEntry]] = defaultdict(list)

    @contextmanager
    def atomic(self, raffle_id: RaffleId) -> Iterator[None]:
        timeout = -1 if self._lock_timeout is None else self._lock_timeout
        if not self._lock.acquire(timeout=timeout):
            raise PersistenceTimeout(f"Timed out locking raffle {raffle_id}")
        try:
            snapshot = self._snapshot()
            try:
                yield
            except BaseException:
                self._restore(snapshot)
                raise
        finally:
            self._lock.release()

    def _snapshot(self) -> tuple:
        return (
            dict(self._raffles),
            dict(self._tickets),
            {key: list(entries) for key, entries in self._draw_log.items()},
        )

    def _restore(self, snapshot: tuple) -> None:
        raffles, tickets, draw_log = snapshot
        self._raffles = raffles
        self._tickets = tickets
        self._draw_log = defaultdict(list, draw_log)

    def add_organizer(self, organizer: Organizer) -> Organizer:
        with self._lock:
            self._organizers[organizer.id] = organizer
        return organizer

    def set_settings(self, settings: PlatformSettings) -> None:
        with self._lock:
            self._settings = settings

    def get_raffle(self, raffle_id: RaffleId) -> Raffle | None:
        with self._lock:
            return self._raffles.get(raffle_id)

    def create_raffle(self, raffle: Raffle) -> Raffle:
        with self._lock:
            if raffle.id in self._raffles:
                raise PersistenceError(f"Raffle {raffle.id} already exists")
            self._raffles[raffle.id] = raffle
        return raffle

    def update_raffle(self, raffle_id: RaffleId, **changes: Any) -> Raffle:
        with self._lock:
            current = self._raffles.get(raffle_id)
            if current is None:
                raise PersistenceError(f"Raffle {raffle_id} does not exist")
            updated = replace(current, **changes)
            self._raffles[raffle_id] = updated
        return updated

    def delete_raffle(self, raffle_id: RaffleId) -> None:
        with self._lock:
            self._raffles.pop(raffle_id, None)
            self._draw_log.pop(raffle_id, None)

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with self._lock:
            return self._tickets.get(ticket_id)

    def find_ticket_by_number(self, ticket_number: str) -> Ticket | None:
        with self._lock:
            matches = [t for t in self._tickets.values() if t.ticket_number == ticket_number]
        return matches[-1] if matches else None

    def create_ticket(self, ticket: Ticket) -> Ticket:
        with self._lock:
            taken = any(
                t.raffle_id == ticket.raffle_id and t.sequence_number == ticket.sequence_number
                for t in self._tickets.values()
            )
            if taken:
                raise PersistenceError(
                    f"Sequence {ticket.sequence_number} already used in raffle {ticket.raffle_id}"
                )
            self._tickets[ticket.id] = ticket
        return ticket

    def update_ticket(self, ticket_id: TicketId, **changes: Any) -> Ticket:
        with self._lock:
            current = self._tickets.get(ticket_id)
            if current is None:
                raise PersistenceError(f"Ticket {ticket_id} does not exist")
            updated = replace(current, **changes)
            self._tickets[ticket_id] = updated
        return updated

    def tickets_for_raffle(self, raffle_id: RaffleId) -> list[Ticket]:
        with self._lock:
            tickets = [t for t in self._tickets.values() if t.raffle_id == raffle_id]
        return sorted(tickets, key=lambda t: t.sequence_number)

    def eligible_tickets(self, raffle_id: RaffleId) -> list[Ticket]:
        return [t for t in self.tickets_for_raffle(raffle_id) if t.is_eligible]

    def append_draw_log_entry(self, entry: DrawLogEntry) -> DrawLogEntry:
        with self._lock:
            entries = self._draw_log[entry.raffle_id]
            if entry.draw_number != len(entries) + 1:
                raise PersistenceError(
                    f"Draw number {entry.draw_number} is not next for raffle {entry.raffle_id}"
                )
            if entry.result is DrawResult.WINNER and any(
                e.result is DrawResult.WINNER for e in entries
            ):
                raise PersistenceError(f"Raffle {entry.raffle_id} already has a winner entry")
            entries.append(entry)
        return entry

    def draw_log(self, raffle_id: RaffleId) -> list[DrawLogEntry]:
        with self._lock:
            return list(self._draw_log.get(raffle_id, ()))

    def draw_log_count(self, raffle_id: RaffleId) -> int:
        with self._lock:
            return len(self._draw_log.get(raffle_id, ()))

    def get_settings(self) -> PlatformSettings:
        return self._settings

    def get_organizer(self, organizer_id: OrganizerId) -> Organizer | None:
        with self._lock:
            return self._organizers.get(organizer_id)
