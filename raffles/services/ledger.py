"""Ticket ledger: selling, verifying and listing tickets of a raffle."""

import logging

from raffles.domain import (
    IssuedTicket,
    Raffle,
    RaffleId,
    Ticket,
    TicketId,
    TicketStatus,
)
from raffles.domain.errors import InvalidInputError, InvalidStateError, TicketNotFoundError
from raffles.domain.lifecycle import check_can_sell, ticket_transition
from raffles.domain.payments import clean_venmo_handle, route_payment, venmo_payment_link
from raffles.domain.rules import is_state_restricted, is_valid_email, ticket_number
from raffles.services.sources import Clock, SystemClock
from raffles.stores.interfaces import RaffleStore

logger = logging.getLogger(__name__)


class TicketLedger:
    """Service-agnostic view of a raffle's tickets, backed by a store."""

    def __init__(self, store: RaffleStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()

    def eligible_tickets(self, raffle_id: RaffleId) -> list[Ticket]:
        """Verified or Confirmed tickets, read fresh from the store on every call."""
        return [t for t in self._store.eligible_tickets(raffle_id) if t.is_eligible]

    def tickets(self, raffle_id: RaffleId) -> list[Ticket]:
        return self._store.tickets_for_raffle(raffle_id)

    def get(self, ticket_id: TicketId) -> Ticket:
        ticket = self._store.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(str(ticket_id))
        return ticket

    def issue(self, raffle: Raffle, email: str, venmo: str, state: str) -> IssuedTicket:
        """Sell the next ticket of ``raffle``.

        The caller must hold the raffle's transaction scope: the sequence
        number is derived from ``tickets_sold`` and written back here.
        """
        if not is_valid_email(email):
            raise InvalidInputError("Invalid email address", field="email")
        player_venmo = clean_venmo_handle(venmo)
        if player_venmo is None:
            raise InvalidInputError("Invalid Venmo handle", field="venmo")
        if is_state_restricted(state):
            raise InvalidInputError("Online raffles are not available in your state", field="state")
        check_can_sell(raffle)

        settings = self._store.get_settings()
        now = self._clock.now()
        sequence_number = raffle.tickets_sold + 1
        number = ticket_number(raffle.ticket_prefix, sequence_number, now.date())
        route = route_payment(
            sequence_number, raffle.owner_prime, settings.owner_venmo, raffle.organizer_venmo
        )
        status = TicketStatus.VERIFIED if settings.auto_verify_tickets else TicketStatus.PENDING

        ticket = self._store.create_ticket(
            Ticket(
                id=TicketId.new(),
                raffle_id=raffle.id,
                sequence_number=sequence_number,
                ticket_number=number,
                payment_recipient=route.recipient_kind,
                player_email=email.lower(),
                player_venmo=player_venmo,
                status=status,
                created_at=now,
            )
        )
        self._store.update_raffle(raffle.id, tickets_sold=sequence_number)
        logger.info(
            "Issued ticket %s for raffle %s, paid to %s",
            number,
            raffle.id,
            route.recipient_kind.value,
        )
        return IssuedTicket(
            ticket=ticket,
            payment_link=venmo_payment_link(route.recipient_handle, raffle.ticket_price, number),
            recipient_handle=route.recipient_handle,
        )

    def submit_payment_proof(
        self, ticket: Ticket, txn_id: str | None = None, screenshot: str | None = None
    ) -> Ticket:
        """A transaction id verifies the ticket; a screenshot alone waits for review."""
        if not txn_id and not screenshot:
            raise InvalidInputError("Please provide a transaction ID or screenshot")
        if ticket.status is not TicketStatus.PENDING:
            raise InvalidStateError("Ticket already verified", current=ticket.status.value)

        changes: dict = {"verified_at": self._clock.now()}
        if screenshot:
            changes["screenshot"] = screenshot
        if txn_id:
            changes["venmo_txn_id"] = txn_id
            changes["status"] = ticket_transition(ticket, TicketStatus.VERIFIED)
        return self._store.update_ticket(ticket.id, **changes)

    def approve(self, ticket: Ticket) -> Ticket:
        status = ticket_transition(ticket, TicketStatus.VERIFIED)
        return self._store.update_ticket(ticket.id, status=status, verified_at=self._clock.now())

    def reject(self, ticket: Ticket) -> Ticket:
        status = ticket_transition(ticket, TicketStatus.REJECTED)
        return self._store.update_ticket(ticket.id, status=status, verified_at=self._clock.now())
