"""Raffle management: creation, activation, cancellation, ticket sales and payout.

These operations surround the drawing core. They share the per-raffle locks
with RaffleOrchestrator so a ticket sale never interleaves with a draw.
"""

import logging
from collections import Counter
from decimal import Decimal, InvalidOperation

from raffles.domain import (
    IssuedTicket,
    Money,
    Organizer,
    PayoutInfo,
    Raffle,
    RaffleId,
    RaffleStatus,
    RecipientKind,
    RecipientTotal,
    SalesReport,
    Ticket,
    TicketId,
    TicketLookup,
    TicketStatus,
)
from raffles.domain.errors import (
    InvalidInputError,
    InvalidStateError,
    RaffleNotFoundError,
    TicketNotFoundError,
)
from raffles.domain.lifecycle import transition
from raffles.domain.payments import clean_venmo_handle
from raffles.domain.rules import capped_max_tickets, is_valid_prefix
from raffles.notifiers.interfaces import Notifier
from raffles.services.authorization import ensure_manages
from raffles.services.ledger import TicketLedger
from raffles.services.locks import RaffleLocks
from raffles.services.orchestrator import draw_log_lines, parse_raffle_id, parse_ticket_id
from raffles.services.sources import Clock, SystemClock
from raffles.stores.interfaces import RaffleStore

logger = logging.getLogger(__name__)


class RaffleService:
    """Service for raffle and ticket management outside the draw itself."""

    def __init__(
        self,
        store: RaffleStore,
        notifier: Notifier,
        clock: Clock | None = None,
        locks: RaffleLocks | None = None,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._clock = clock or SystemClock()
        self._locks = locks or RaffleLocks()
        self._timeout = timeout
        self._ledger = TicketLedger(store, self._clock)

    def _notify(self, send, *args) -> None:
        try:
            send(*args)
        except Exception:
            logger.exception("Notification %s failed", getattr(send, "__name__", send))

    def get_raffle(self, raffle_id: str | RaffleId) -> Raffle:
        rid = parse_raffle_id(raffle_id)
        raffle = self._store.get_raffle(rid)
        if raffle is None:
            raise RaffleNotFoundError(str(rid))
        return raffle

    def create_raffle(
        self,
        actor: Organizer,
        name: str,
        beneficiary_name: str,
        ticket_price: Decimal | str,
        ticket_prefix: str,
        max_tickets: int | None = None,
        min_tickets_enabled: bool = False,
        min_tickets: int | None = None,
    ) -> Raffle:
        """Create a Draft raffle. Pending organizers are allowed to do this."""
        if not name.strip():
            raise InvalidInputError("Missing required field: name", field="name")
        if not beneficiary_name.strip():
            raise InvalidInputError(
                "Missing required field: beneficiary_name", field="beneficiary_name"
            )
        try:
            price = Decimal(str(ticket_price))
        except InvalidOperation:
            raise InvalidInputError("Invalid ticket price", field="ticket_price") from None
        if not price.is_finite() or price <= 0:
            raise InvalidInputError("Ticket price must be positive", field="ticket_price")
        if not is_valid_prefix(ticket_prefix):
            raise InvalidInputError(
                "Ticket prefix must be 1-10 letters or digits", field="ticket_prefix"
            )
        if max_tickets is not None and max_tickets < 1:
            raise InvalidInputError("Max tickets must be positive", field="max_tickets")
        if min_tickets is not None and min_tickets < 1:
            raise InvalidInputError("Minimum tickets must be positive", field="min_tickets")
        organizer_venmo = clean_venmo_handle(actor.venmo_handle)
        if organizer_venmo is None:
            raise InvalidInputError("Organizer has no valid Venmo handle", field="venmo")

        cap = capped_max_tickets(price, max_tickets)
        if cap < 1:
            raise InvalidInputError("Ticket price is too high", field="ticket_price")

        settings = self._store.get_settings()
        raffle = self._store.create_raffle(
            Raffle(
                id=RaffleId.new(),
                organizer_id=actor.id,
                name=name.strip(),
                beneficiary_name=beneficiary_name.strip(),
                ticket_prefix=ticket_prefix.upper(),
                organizer_venmo=organizer_venmo,
                ticket_price=Money(price),
                max_tickets=cap,
                owner_prime=settings.owner_prime,
                min_tickets_enabled=min_tickets_enabled,
                min_tickets=min_tickets or settings.owner_prime,
                created_at=self._clock.now(),
            )
        )
        logger.info("Raffle %s created by %s with %d tickets", raffle.id, actor.id, cap)
        return raffle

    def activate(self, raffle_id: str | RaffleId, actor: Organizer) -> Raffle:
        rid = parse_raffle_id(raffle_id)
        with self._locks.hold(rid, self._timeout), self._store.atomic(rid):
            raffle = self.get_raffle(rid)
            ensure_manages(actor, raffle)
            if raffle.status is not RaffleStatus.DRAFT:
                raise InvalidStateError(
                    "Only draft raffles can be activated", current=raffle.status.value
                )
            raffle = self._store.update_raffle(
                rid, status=transition(raffle, RaffleStatus.ACTIVE)
            )
        logger.info("Raffle %s activated", rid)
        return raffle

    def cancel(self, raffle_id: str | RaffleId, reason: str, actor: Organizer) -> Raffle:
        if not reason or not reason.strip():
            raise InvalidInputError("Cancellation reason is required", field="reason")
        rid = parse_raffle_id(raffle_id)
        with self._locks.hold(rid, self._timeout), self._store.atomic(rid):
            raffle = self.get_raffle(rid)
            ensure_manages(actor, raffle)
            if raffle.status is RaffleStatus.COMPLETE:
                raise InvalidStateError(
                    "Cannot cancel a completed raffle", current=raffle.status.value
                )
            raffle = self._store.update_raffle(
                rid, status=transition(raffle, RaffleStatus.CANCELLED)
            )
        tickets = self._ledger.tickets(rid)
        logger.info("Raffle %s cancelled with %d tickets sold", rid, len(tickets))
        if tickets:
            self._notify(self._notifier.notify_raffle_cancelled, raffle, tickets, reason.strip())
        return raffle

    def delete(self, raffle_id: str | RaffleId, actor: Organizer) -> None:
        """Only raffles that never sold a ticket may be erased."""
        rid = parse_raffle_id(raffle_id)
        with self._locks.hold(rid, self._timeout), self._store.atomic(rid):
            raffle = self.get_raffle(rid)
            ensure_manages(actor, raffle)
            if raffle.status is RaffleStatus.COMPLETE or raffle.tickets_sold > 0:
                raise InvalidStateError(
                    "Raffles with tickets cannot be deleted; cancel instead",
                    current=raffle.status.value,
                )
            self._store.delete_raffle(rid)
        logger.info("Raffle %s deleted", rid)

    def purchase_ticket(
        self, raffle_id: str | RaffleId, email: str, venmo: str, state: str
    ) -> IssuedTicket:
        rid = parse_raffle_id(raffle_id)
        with self._locks.hold(rid, self._timeout), self._store.atomic(rid):
            raffle = self.get_raffle(rid)
            issued = self._ledger.issue(raffle, email, venmo, state)
        self._notify(
            self._notifier.notify_ticket_issued, issued.ticket, raffle, issued.payment_link
        )
        return issued

    def submit_payment_proof(
        self,
        ticket_id: str | TicketId,
        txn_id: str | None = None,
        screenshot: str | None = None,
    ) -> Ticket:
        ticket = self._ledger.get(parse_ticket_id(ticket_id))
        with self._locks.hold(ticket.raffle_id, self._timeout), self._store.atomic(ticket.raffle_id):
            return self._ledger.submit_payment_proof(
                self._ledger.get(ticket.id), txn_id=txn_id, screenshot=screenshot
            )

    def review_ticket(self, ticket_id: str | TicketId, approve: bool, actor: Organizer) -> Ticket:
        ticket = self._ledger.get(parse_ticket_id(ticket_id))
        with self._locks.hold(ticket.raffle_id, self._timeout), self._store.atomic(ticket.raffle_id):
            raffle = self.get_raffle(ticket.raffle_id)
            ensure_manages(actor, raffle)
            if raffle.is_terminal:
                raise InvalidStateError(
                    "Tickets of a finished raffle cannot be reviewed", current=raffle.status.value
                )
            ticket = self._ledger.get(ticket.id)
            if approve:
                return self._ledger.approve(ticket)
            return self._ledger.reject(ticket)

    def payout_info(self, raffle_id: str | RaffleId, actor: Organizer) -> PayoutInfo:
        raffle = self.get_raffle(raffle_id)
        ensure_manages(actor, raffle)
        if raffle.winning_ticket_id is None:
            raise InvalidStateError("No winner selected yet", current=raffle.status.value)
        return PayoutInfo(
            raffle=raffle,
            jackpot=raffle.jackpot,
            winner=self._store.get_ticket(raffle.winning_ticket_id),
        )

    def confirm_payout(self, raffle_id: str | RaffleId, actor: Organizer) -> Raffle:
        """Record that the organizer paid the winner. No money moves here."""
        rid = parse_raffle_id(raffle_id)
        with self._locks.hold(rid, self._timeout), self._store.atomic(rid):
            raffle = self.get_raffle(rid)
            ensure_manages(actor, raffle)
            if raffle.status is not RaffleStatus.COMPLETE:
                raise InvalidStateError("Raffle drawing not complete", current=raffle.status.value)
            if raffle.payout_confirmed:
                raise InvalidStateError("Payout already confirmed", current=raffle.status.value)
            raffle = self._store.update_raffle(
                rid, payout_confirmed=True, payout_confirmed_at=self._clock.now()
            )
        logger.info("Payout of %s confirmed for raffle %s", raffle.jackpot, rid)
        return raffle


    def pending_tickets(self, raffle_id: str | RaffleId, actor: Organizer) -> list[Ticket]:
        """Tickets still waiting for payment proof or the organizer's review."""
        raffle = self.get_raffle(raffle_id)
        ensure_manages(actor, raffle)
        return [t for t in self._ledger.tickets(raffle.id) if t.status is TicketStatus.PENDING]

    def sales_report(self, raffle_id: str | RaffleId, actor: Organizer) -> SalesReport:
        raffle = self.get_raffle(raffle_id)
        ensure_manages(actor, raffle)
        tickets = self._ledger.tickets(raffle.id)
        counts = Counter(t.payment_recipient for t in tickets)
        totals = tuple(
            RecipientTotal(kind, counts[kind], raffle.ticket_price.times(counts[kind]))
            for kind in RecipientKind
        )
        owner_revenue = raffle.ticket_price.times(counts[RecipientKind.OWNER])
        # Floored at zero: with a very small owner prime the owner's share passes half.
        net = max(raffle.gross.amount - raffle.jackpot.amount - owner_revenue.amount, Decimal(0))
        winner = None
        if raffle.winning_ticket_id is not None:
            winner = self._store.get_ticket(raffle.winning_ticket_id)
        return SalesReport(
            raffle=raffle,
            organizer=self._store.get_organizer(raffle.organizer_id),
            gross=raffle.gross,
            jackpot=raffle.jackpot,
            owner_revenue=owner_revenue,
            net_to_beneficiary=Money(net),
            totals=totals,
            tickets=tuple(tickets),
            winner=winner,
            draw_log=tuple(draw_log_lines(self._store, raffle.id)),
        )

    def ticket_by_number(self, ticket_number: str) -> TicketLookup:
        """Public lookup of a ticket and its raffle by the printed number."""
        number = ticket_number.strip().upper()
        ticket = self._store.find_ticket_by_number(number) if number else None
        if ticket is None:
            raise TicketNotFoundError(number)
        return TicketLookup(ticket=ticket, raffle=self.get_raffle(ticket.raffle_id))
