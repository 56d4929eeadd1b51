"""Bounded redraw protocol and winner confirmation.

A redraw logs the rejected candidate as Invalid, retires that ticket for good,
spends one redraw attempt and picks a new candidate. The attempt stays spent
even when nothing is left to pick. Confirmation logs the single Winner entry
and completes the raffle exactly once.
"""

import logging

from raffles.domain import (
    DrawLogEntry,
    DrawResult,
    Raffle,
    RaffleStatus,
    RedrawOutcome,
    Ticket,
    TicketStatus,
)
from raffles.domain.errors import (
    InvalidInputError,
    InvalidStateError,
    MaxRedrawsExceededError,
    NoEligibleTicketsError,
)
from raffles.domain.lifecycle import check_can_confirm, check_drawing, ticket_transition, transition
from raffles.services.draw_engine import DrawEngine
from raffles.services.sources import Clock, SystemClock
from raffles.stores.interfaces import RaffleStore

logger = logging.getLogger(__name__)

DEFAULT_REDRAW_REASON = "Payment not confirmed"


def check_belongs(raffle: Raffle, ticket: Ticket) -> None:
    if ticket.raffle_id != raffle.id:
        raise InvalidInputError("Ticket does not belong to this raffle", field="ticket_id")


def check_draw_number(expected: int | None, actual: int) -> None:
    """Reject a commit made against a candidate the log has already moved past."""
    if expected is not None and expected != actual:
        raise InvalidStateError(
            f"Draw {expected} is stale; the next draw is {actual}", current=RaffleStatus.DRAWING.value
        )


class RedrawController:
    def __init__(self, store: RaffleStore, engine: DrawEngine, clock: Clock | None = None) -> None:
        self._store = store
        self._engine = engine
        self._clock = clock or SystemClock()

    def redraw(
        self,
        raffle: Raffle,
        invalid_ticket: Ticket,
        reason: str = DEFAULT_REDRAW_REASON,
        expected_draw_number: int | None = None,
    ) -> RedrawOutcome:
        reason = reason.strip() or DEFAULT_REDRAW_REASON

        with self._store.atomic(raffle.id):
            raffle = self._store.get_raffle(raffle.id) or raffle
            check_drawing(raffle)
            settings = self._store.get_settings()
            if raffle.redraw_count >= settings.max_redraws:
                logger.warning(
                    "Raffle %s hit the redraw cap of %d; escalating to owner",
                    raffle.id,
                    settings.max_redraws,
                )
                raise MaxRedrawsExceededError(settings.max_redraws)

            invalid_ticket = self._store.get_ticket(invalid_ticket.id) or invalid_ticket
            check_belongs(raffle, invalid_ticket)
            status = ticket_transition(invalid_ticket, TicketStatus.INVALID)

            draw_number = self._store.draw_log_count(raffle.id) + 1
            check_draw_number(expected_draw_number, draw_number)
            entry = self._store.append_draw_log_entry(
                DrawLogEntry(
                    raffle_id=raffle.id,
                    ticket_id=invalid_ticket.id,
                    draw_number=draw_number,
                    result=DrawResult.INVALID,
                    reason=reason,
                    timestamp=self._clock.now(),
                )
            )
            invalid_ticket = self._store.update_ticket(invalid_ticket.id, status=status)
            raffle = self._store.update_raffle(
                raffle.id,
                status=transition(raffle, RaffleStatus.DRAWING),
                redraw_count=raffle.redraw_count + 1,
            )
            new_ticket = self._engine.select_ticket(raffle.id)

        logger.info(
            "Draw %d of raffle %s invalidated ticket %s: %s",
            draw_number,
            raffle.id,
            invalid_ticket.ticket_number,
            reason,
        )
        if new_ticket is None:
            raise NoEligibleTicketsError(str(raffle.id), after_redraw=True)

        return RedrawOutcome(
            raffle=raffle,
            invalidated=entry,
            new_ticket=new_ticket,
            draw_number=draw_number + 1,
            redraws_remaining=max(0, settings.max_redraws - raffle.redraw_count),
        )


class WinnerConfirmation:
    def __init__(self, store: RaffleStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()

    def confirm(self, raffle: Raffle, ticket: Ticket, draw_number: int | None = None) -> Raffle:
        """Commit ``ticket`` as the winner. ``draw_number`` must be the next free one."""
        with self._store.atomic(raffle.id):
            raffle = self._store.get_raffle(raffle.id) or raffle
            check_can_confirm(raffle)
            ticket = self._store.get_ticket(ticket.id) or ticket
            check_belongs(raffle, ticket)
            if not ticket.is_eligible:
                raise InvalidStateError(
                    "Only verified tickets can win", current=ticket.status.value
                )

            next_number = self._store.draw_log_count(raffle.id) + 1
            check_draw_number(draw_number, next_number)
            now = self._clock.now()
            self._store.append_draw_log_entry(
                DrawLogEntry(
                    raffle_id=raffle.id,
                    ticket_id=ticket.id,
                    draw_number=next_number,
                    result=DrawResult.WINNER,
                    timestamp=now,
                )
            )
            if ticket.status is not TicketStatus.CONFIRMED:
                self._store.update_ticket(
                    ticket.id,
                    status=ticket_transition(ticket, TicketStatus.CONFIRMED),
                    verified_at=now,
                )
            raffle = self._store.update_raffle(
                raffle.id,
                status=transition(raffle, RaffleStatus.COMPLETE),
                winning_ticket_id=ticket.id,
                drawn_at=now,
            )

        logger.info(
            "Raffle %s complete: ticket %s won on draw %d",
            raffle.id,
            ticket.ticket_number,
            next_number,
        )
        return raffle
