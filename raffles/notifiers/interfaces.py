"""Notifier interface.

Notifications are fire-and-forget from the drawing core's point of view: a
failing notifier must never undo or fail a draw, redraw or confirmation.
"""

from abc import ABC, abstractmethod

from raffles.domain import DrawLogLine, Organizer, Raffle, Ticket


class Notifier(ABC):
    """Interface for player and organizer notifications."""

    @abstractmethod
    def notify_winner(self, ticket: Ticket, raffle: Raffle) -> None:
        ...

    @abstractmethod
    def notify_payout_due(self, organizer: Organizer, raffle: Raffle, ticket: Ticket) -> None:
        ...

    @abstractmethod
    def notify_players_of_result(
        self,
        raffle: Raffle,
        draw_log: list[DrawLogLine],
        winning_ticket: Ticket,
        tickets: list[Ticket],
    ) -> None:
        """Send the drawing report to every player of the raffle."""
        ...

    @abstractmethod
    def notify_draw_started(self, raffle: Raffle) -> None:
        ...

    @abstractmethod
    def notify_ticket_invalidated(self, ticket: Ticket, raffle: Raffle, reason: str) -> None:
        ...

    @abstractmethod
    def notify_ticket_issued(self, ticket: Ticket, raffle: Raffle, payment_link: str) -> None:
        ...

    @abstractmethod
    def notify_raffle_cancelled(self, raffle: Raffle, tickets: list[Ticket], reason: str) -> None:
        ...
