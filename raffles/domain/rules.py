"""Pure raffle rules: ticket numbering, jackpot cap, input validation."""

import re
from datetime import date
from decimal import Decimal

MAX_GROSS = Decimal(1200)  # jackpot is half of gross, so this caps it at $600
RESTRICTED_STATES = frozenset({"AL", "HI", "UT"})

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PREFIX_PATTERN = re.compile(r"^[A-Z0-9]{1,10}$")


def max_tickets_for_price(ticket_price: Decimal) -> int:
    if ticket_price <= 0:
        raise ValueError("Ticket price must be positive")
    return int(MAX_GROSS // ticket_price)


def capped_max_tickets(ticket_price: Decimal, requested: int | None = None) -> int:
    """The server-side cap wins over whatever the organizer asked for."""
    cap = max_tickets_for_price(ticket_price)
    if requested is None:
        return cap
    return min(requested, cap)


def ticket_number(prefix: str, sequence_number: int, on: date) -> str:
    """Format: PREFIX-YYYYMMDD-NNNN."""
    return f"{prefix.upper()}-{on:%Y%m%d}-{sequence_number:04d}"


def is_valid_prefix(prefix: str) -> bool:
    return bool(_PREFIX_PATTERN.match(prefix.upper()))


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_PATTERN.match(email))


def is_state_restricted(state_code: str, additional: frozenset[str] = frozenset()) -> bool:
    return state_code.upper() in RESTRICTED_STATES | additional
