from raffles.domain.models import (
    AccountStatus,
    DrawCandidate,
    DrawingStatus,
    DrawLogEntry,
    DrawLogLine,
    DrawResult,
    IssuedTicket,
    Organizer,
    PayoutInfo,
    PlatformSettings,
    Raffle,
    RaffleStatus,
    RecipientKind,
    RecipientTotal,
    RedrawOutcome,
    Role,
    SalesReport,
    Ticket,
    TicketLookup,
    TicketStatus,
)
from raffles.domain.value_objects import Money, OrganizerId, RaffleId, TicketId

__all__ = [
    "AccountStatus",
    "DrawCandidate",
    "DrawingStatus",
    "DrawLogEntry",
    "DrawLogLine",
    "DrawResult",
    "IssuedTicket",
    "Organizer",
    "PayoutInfo",
    "PlatformSettings",
    "Raffle",
    "RaffleStatus",
    "RecipientKind",
    "RecipientTotal",
    "RedrawOutcome",
    "Role",
    "SalesReport",
    "Ticket",
    "TicketLookup",
    "TicketStatus",
    "RaffleId",
    "TicketId",
    "OrganizerId",
    "Money",
]
