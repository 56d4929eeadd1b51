"""Raffle and ticket state machines.

Statuses only move along the edges listed in the transition tables below.
The guard functions raise domain errors and never mutate anything; callers
persist the returned target status themselves.
"""

from raffles.domain.errors import (
    AlreadyCompleteError,
    BelowMinimumError,
    InvalidStateError,
    SoldOutError,
)
from raffles.domain.models import Raffle, RaffleStatus, Ticket, TicketStatus

RAFFLE_TRANSITIONS: dict[RaffleStatus, frozenset[RaffleStatus]] = {
    RaffleStatus.DRAFT: frozenset({RaffleStatus.ACTIVE, RaffleStatus.CANCELLED}),
    RaffleStatus.ACTIVE: frozenset({RaffleStatus.DRAWING, RaffleStatus.CANCELLED}),
    RaffleStatus.DRAWING: frozenset({RaffleStatus.DRAWING, RaffleStatus.COMPLETE}),
    RaffleStatus.COMPLETE: frozenset(),
    RaffleStatus.CANCELLED: frozenset(),
}

TICKET_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.PENDING: frozenset(
        {TicketStatus.VERIFIED, TicketStatus.REJECTED, TicketStatus.INVALID}
    ),
    TicketStatus.VERIFIED: frozenset(
        {TicketStatus.CONFIRMED, TicketStatus.INVALID, TicketStatus.REJECTED}
    ),
    TicketStatus.CONFIRMED: frozenset(),
    TicketStatus.INVALID: frozenset(),
    TicketStatus.REJECTED: frozenset(),
}

DRAWABLE = frozenset({RaffleStatus.ACTIVE, RaffleStatus.DRAWING})


def can_transition(current: RaffleStatus, target: RaffleStatus) -> bool:
    return target in RAFFLE_TRANSITIONS[current]


def transition(raffle: Raffle, target: RaffleStatus) -> RaffleStatus:
    """Validate ``raffle.status -> target`` and return the target."""
    if not can_transition(raffle.status, target):
        raise InvalidStateError(
            f"Cannot move raffle from {raffle.status.value} to {target.value}",
            current=raffle.status.value,
        )
    return target


def ticket_transition(ticket: Ticket, target: TicketStatus) -> TicketStatus:
    if target not in TICKET_TRANSITIONS[ticket.status]:
        raise InvalidStateError(
            f"Cannot move ticket from {ticket.status.value} to {target.value}",
            current=ticket.status.value,
        )
    return target


def check_minimum_tickets(raffle: Raffle) -> None:
    if not raffle.min_tickets_enabled:
        return
    if raffle.tickets_sold < raffle.required_minimum:
        raise BelowMinimumError(required=raffle.required_minimum, sold=raffle.tickets_sold)


def check_can_draw(raffle: Raffle) -> None:
    """A draw may run on Active or Drawing raffles that pass the minimum gate."""
    if raffle.status not in DRAWABLE:
        raise InvalidStateError("Raffle is not active", current=raffle.status.value)
    check_minimum_tickets(raffle)


def check_drawing(raffle: Raffle) -> None:
    if raffle.status is not RaffleStatus.DRAWING:
        raise InvalidStateError("Raffle is not in drawing state", current=raffle.status.value)


def check_can_confirm(raffle: Raffle) -> None:
    if raffle.status is RaffleStatus.COMPLETE:
        raise AlreadyCompleteError(str(raffle.id))
    check_drawing(raffle)


def check_can_sell(raffle: Raffle) -> None:
    if raffle.status is not RaffleStatus.ACTIVE:
        raise InvalidStateError(
            "This raffle is not currently accepting tickets", current=raffle.status.value
        )
    if raffle.is_sold_out:
        raise SoldOutError(raffle.max_tickets)
