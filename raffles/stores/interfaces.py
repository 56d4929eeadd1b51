"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any

from raffles.domain import (
    DrawLogEntry,
    Organizer,
    OrganizerId,
    PlatformSettings,
    Raffle,
    RaffleId,
    Ticket,
    TicketId,
)


class PersistenceError(Exception):
    """A store could not complete a read or write."""


class PersistenceTimeout(PersistenceError):
    """A store operation did not finish within the configured timeout."""


class RaffleStore(ABC):
    """Interface for raffle persistence operations."""

    @abstractmethod
    def atomic(self, raffle_id: RaffleId) -> AbstractContextManager[None]:
        """Return a transaction scope that locks the raffle for writing.

        Everything written inside the scope is committed together, or not at
        all if the block raises.
        """
        ...

    @abstractmethod
    def get_raffle(self, raffle_id: RaffleId) -> Raffle | None:
        """Return a raffle by ID, or None if not found."""
        ...

    @abstractmethod
    def create_raffle(self, raffle: Raffle) -> Raffle:
        ...

    @abstractmethod
    def update_raffle(self, raffle_id: RaffleId, **changes: Any) -> Raffle:
        """Apply a patch of domain field names to a raffle and return it."""
        ...

    @abstractmethod
    def delete_raffle(self, raffle_id: RaffleId) -> None:
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        """Return a ticket by ID, or None if not found."""
        ...

    @abstractmethod
    def find_ticket_by_number(self, ticket_number: str) -> Ticket | None:
        """Return the most recently created ticket with this number, or None.

        Numbers are unique within a raffle only; two raffles sharing a prefix
        issue the same numbers on the same day.
        """
        ...

    @abstractmethod
    def create_ticket(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    def update_ticket(self, ticket_id: TicketId, **changes: Any) -> Ticket:
        """Apply a patch of domain field names to a ticket and return it."""
        ...

    @abstractmethod
    def tickets_for_raffle(self, raffle_id: RaffleId) -> list[Ticket]:
        """Return all tickets of a raffle ordered by sequence number."""
        ...

    @abstractmethod
    def eligible_tickets(self, raffle_id: RaffleId) -> list[Ticket]:
        """Return Verified or Confirmed tickets ordered by sequence number.

        Must reflect the latest persisted state; implementations never cache.
        """
        ...

    @abstractmethod
    def append_draw_log_entry(self, entry: DrawLogEntry) -> DrawLogEntry:
        """Append an entry; its draw number must equal the current count + 1."""
        ...

    @abstractmethod
    def draw_log(self, raffle_id: RaffleId) -> list[DrawLogEntry]:
        """Return the raffle's draw log ordered by draw number ascending."""
        ...

    @abstractmethod
    def draw_log_count(self, raffle_id: RaffleId) -> int:
        ...

    @abstractmethod
    def get_settings(self) -> PlatformSettings:
        ...

    @abstractmethod
    def get_organizer(self, organizer_id: OrganizerId) -> Organizer | None:
        ...
