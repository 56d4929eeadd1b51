"""Notifier that records every notification in the application log."""

import logging

from raffles.domain import DrawLogLine, Organizer, Raffle, Ticket
from raffles.notifiers.interfaces import Notifier

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):
    def notify_winner(self, ticket: Ticket, raffle: Raffle) -> None:
        logger.info(
            "Winner notice: ticket %s won raffle %s, jackpot %s",
            ticket.ticket_number,
            raffle.id,
            raffle.jackpot,
        )

    def notify_payout_due(self, organizer: Organizer, raffle: Raffle, ticket: Ticket) -> None:
        logger.info(
            "Payout notice: organizer %s owes %s to ticket %s for raffle %s",
            organizer.id,
            raffle.jackpot,
            ticket.ticket_number,
            raffle.id,
        )

    def notify_players_of_result(
        self,
        raffle: Raffle,
        draw_log: list[DrawLogLine],
        winning_ticket: Ticket,
        tickets: list[Ticket],
    ) -> None:
        players = {t.player_email for t in tickets}
        logger.info(
            "Drawing report for raffle %s sent to %d players: winner %s after %d draws",
            raffle.id,
            len(players),
            winning_ticket.ticket_number,
            len(draw_log),
        )

    def notify_draw_started(self, raffle: Raffle) -> None:
        logger.info("Drawing started for raffle %s with %d tickets", raffle.id, raffle.tickets_sold)

    def notify_ticket_invalidated(self, ticket: Ticket, raffle: Raffle, reason: str) -> None:
        logger.info(
            "Ticket %s invalidated in raffle %s: %s", ticket.ticket_number, raffle.id, reason
        )

    def notify_ticket_issued(self, ticket: Ticket, raffle: Raffle, payment_link: str) -> None:
        logger.info("Ticket %s issued for raffle %s", ticket.ticket_number, raffle.id)

    def notify_raffle_cancelled(self, raffle: Raffle, tickets: list[Ticket], reason: str) -> None:
        logger.info(
            "Cancellation notice for raffle %s sent to %d ticket holders: %s",
            raffle.id,
            len(tickets),
            reason,
        )
