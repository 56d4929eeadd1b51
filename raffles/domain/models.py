"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in raffles/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from raffles.domain.value_objects import Money, OrganizerId, RaffleId, TicketId

JACKPOT_SHARE = Decimal("0.5")


class RaffleStatus(Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    DRAWING = "Drawing"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"


class TicketStatus(Enum):
    PENDING = "Pending"
    VERIFIED = "Verified"
    CONFIRMED = "Confirmed"
    INVALID = "Invalid"
    REJECTED = "Rejected"


class RecipientKind(Enum):
    """Who a ticket's payment is routed to."""

    ORGANIZER = "Organizer"
    OWNER = "Owner"


class DrawResult(Enum):
    WINNER = "Winner"
    INVALID = "Invalid"


class Role(Enum):
    OWNER = "Owner"
    ORGANIZER = "Organizer"


class AccountStatus(Enum):
    PENDING = "Pending"
    APPROVED = "Approved"


ELIGIBLE_TICKET_STATUSES = frozenset({TicketStatus.VERIFIED, TicketStatus.CONFIRMED})


@dataclass(frozen=True)
class Organizer:
    """An account allowed to run raffles, or the platform owner."""

    id: OrganizerId
    name: str
    email: str
    venmo_handle: str
    role: Role = Role.ORGANIZER
    status: AccountStatus = AccountStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status is AccountStatus.PENDING

    @property
    def is_owner(self) -> bool:
        return self.role is Role.OWNER


@dataclass(frozen=True)
class Raffle:
    """Domain representation of a 50/50 Raffle."""

    id: RaffleId
    organizer_id: OrganizerId
    name: str
    beneficiary_name: str
    ticket_prefix: str
    organizer_venmo: str
    ticket_price: Money
    max_tickets: int
    tickets_sold: int = 0
    owner_prime: int = 11
    min_tickets_enabled: bool = False
    min_tickets: int | None = None
    status: RaffleStatus = RaffleStatus.DRAFT
    redraw_count: int = 0
    winning_ticket_id: TicketId | None = None
    drawn_at: datetime | None = None
    payout_confirmed: bool = False
    payout_confirmed_at: datetime | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.ticket_price.amount <= 0:
            raise ValueError("Ticket price must be positive")
        if self.max_tickets < 1:
            raise ValueError("Max tickets must be positive")
        if not 0 <= self.tickets_sold <= self.max_tickets:
            raise ValueError("Tickets sold must be between 0 and max tickets")
        if self.owner_prime < 1:
            raise ValueError("Owner prime must be positive")
        if self.min_tickets is not None and self.min_tickets < 1:
            raise ValueError("Minimum tickets must be positive")
        if self.redraw_count < 0:
            raise ValueError("Redraw count cannot be negative")

    @property
    def required_minimum(self) -> int:
        return self.min_tickets or self.owner_prime

    @property
    def tickets_remaining(self) -> int:
        return max(0, self.max_tickets - self.tickets_sold)

    @property
    def is_sold_out(self) -> bool:
        return self.tickets_sold >= self.max_tickets

    @property
    def gross(self) -> Money:
        return self.ticket_price.times(self.tickets_sold)

    @property
    def jackpot(self) -> Money:
        return self.gross.times(JACKPOT_SHARE)

    @property
    def is_terminal(self) -> bool:
        return self.status in (RaffleStatus.COMPLETE, RaffleStatus.CANCELLED)


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a numbered Ticket."""

    id: TicketId
    raffle_id: RaffleId
    sequence_number: int
    ticket_number: str
    payment_recipient: RecipientKind
    player_email: str
    player_venmo: str
    status: TicketStatus = TicketStatus.PENDING
    venmo_txn_id: str | None = None
    screenshot: str | None = None
    created_at: datetime | None = None
    verified_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.sequence_number < 1:
            raise ValueError("Sequence number is 1-based")

    @property
    def is_eligible(self) -> bool:
        return self.status in ELIGIBLE_TICKET_STATUSES


@dataclass(frozen=True)
class DrawLogEntry:
    """One append-only audit record of a draw outcome."""

    raffle_id: RaffleId
    ticket_id: TicketId
    draw_number: int
    result: DrawResult
    timestamp: datetime
    reason: str = ""

    def __post_init__(self) -> None:
        if self.draw_number < 1:
            raise ValueError("Draw number is 1-based")
        if self.result is DrawResult.INVALID and not self.reason.strip():
            raise ValueError("Invalid draws require a reason")


@dataclass(frozen=True)
class PlatformSettings:
    """Process-wide settings, read-only to the drawing core."""

    max_redraws: int = 3
    owner_venmo: str = ""
    owner_prime: int = 11
    auto_verify_tickets: bool = True


@dataclass(frozen=True)
class DrawCandidate:
    """A selected ticket and the draw number it would occupy once committed."""

    ticket: Ticket
    draw_number: int


@dataclass(frozen=True)
class RedrawOutcome:
    raffle: Raffle
    invalidated: DrawLogEntry
    new_ticket: Ticket
    draw_number: int
    redraws_remaining: int


@dataclass(frozen=True)
class DrawLogLine:
    """A draw log entry enriched with the human-readable ticket number."""

    draw_number: int
    ticket_number: str
    result: DrawResult
    reason: str | None
    timestamp: datetime


@dataclass(frozen=True)
class DrawingStatus:
    draw_count: int
    redraws: int
    redraws_remaining: int
    max_redraws: int
    needs_escalation: bool
    min_tickets_required: int | None
    draw_log: tuple[DrawLogLine, ...] = ()


@dataclass(frozen=True)
class IssuedTicket:
    """A freshly sold ticket plus the payment link the player must use."""

    ticket: Ticket
    payment_link: str
    recipient_handle: str


@dataclass(frozen=True)
class PayoutInfo:
    raffle: Raffle
    jackpot: Money
    winner: Ticket | None


@dataclass(frozen=True)
class RecipientTotal:
    """Tickets routed to one payee and what that payee should have collected."""

    recipient: RecipientKind
    tickets: int
    amount: Money


@dataclass(frozen=True)
class SalesReport:
    """Organizer's view of a raffle's money, tickets and draw history."""

    raffle: Raffle
    organizer: Organizer | None
    gross: Money
    jackpot: Money
    owner_revenue: Money
    net_to_beneficiary: Money
    totals: tuple[RecipientTotal, ...]
    tickets: tuple[Ticket, ...]
    winner: Ticket | None = None
    draw_log: tuple[DrawLogLine, ...] = ()


@dataclass(frozen=True)
class TicketLookup:
    ticket: Ticket
    raffle: Raffle

    @property
    def is_winner(self) -> bool:
        return self.raffle.winning_ticket_id == self.ticket.id
