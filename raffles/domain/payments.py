"""Payment routing between the raffle organizer and the platform owner.

The first ticket always pays the organizer so every raffle starts with seed
money. After that every ticket whose sequence number is a multiple of the
owner prime pays the owner, giving the platform a ~1/prime share of gross
sales without keeping a running ledger. The route is computed once when a
ticket is sold and stored on the ticket.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from urllib.parse import quote, urlencode

from raffles.domain.models import RecipientKind
from raffles.domain.value_objects import Money

VENMO_HANDLE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{5,30}$")
PAYMENT_NOTE_PREFIX = "FIFTYFIFTY"


@dataclass(frozen=True)
class PaymentRoute:
    recipient_handle: str
    recipient_kind: RecipientKind


def route_payment(
    sequence_number: int,
    owner_prime: int,
    owner_handle: str,
    organizer_handle: str,
) -> PaymentRoute:
    """Decide who receives the payment for the ticket at ``sequence_number``."""
    if sequence_number < 1:
        raise ValueError("Sequence number is 1-based")
    if owner_prime < 1:
        raise ValueError("Owner prime must be positive")

    if sequence_number == 1:
        return PaymentRoute(organizer_handle, RecipientKind.ORGANIZER)
    if sequence_number % owner_prime == 0:
        return PaymentRoute(owner_handle, RecipientKind.OWNER)
    return PaymentRoute(organizer_handle, RecipientKind.ORGANIZER)


def owner_share_percentage(owner_prime: int) -> Decimal:
    """Approximate share of gross sales routed to the owner, in percent."""
    return (Decimal(100) / Decimal(owner_prime)).quantize(Decimal("0.01"))


def venmo_payment_link(recipient: str, amount: Money, ticket_number: str) -> str:
    """Build a Venmo deep link with the amount and ticket note pre-filled."""
    query = urlencode(
        {
            "txn": "pay",
            "amount": str(amount),
            "note": f"{PAYMENT_NOTE_PREFIX}-{ticket_number}",
            "audience": "private",
        },
        quote_via=quote,
    )
    return f"https://venmo.com/{recipient}?{query}"


def clean_venmo_handle(handle: str | None) -> str | None:
    """Strip a leading ``@`` and validate; returns None when the handle is unusable."""
    if not handle:
        return None
    cleaned = handle.strip().removeprefix("@")
    if not VENMO_HANDLE_PATTERN.match(cleaned):
        return None
    return cleaned
