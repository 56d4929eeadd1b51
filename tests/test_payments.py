"""Unit tests for payment routing and Venmo links.

Run with: pytest tests/test_payments.py -v
"""

from decimal import Decimal
from urllib.parse import parse_qs, urlsplit

import pytest

from raffles.domain import Money, RecipientKind
from raffles.domain.payments import (
    clean_venmo_handle,
    owner_share_percentage,
    route_payment,
    venmo_payment_link,
)


class TestRoutePayment:
    """Tests for the organizer/owner split."""

    @pytest.mark.parametrize("prime", [7, 11, 13])
    def test_route_matches_modular_rule(self, prime):
        """Ticket 1 pays the organizer; later multiples of the prime pay the owner."""
        for n in range(1, 10001):
            route = route_payment(n, prime, "platform-owner", "treasurer-venmo")
            if n == 1 or n % prime:
                assert route.recipient_kind is RecipientKind.ORGANIZER
                assert route.recipient_handle == "treasurer-venmo"
            else:
                assert route.recipient_kind is RecipientKind.OWNER
                assert route.recipient_handle == "platform-owner"

    def test_first_ticket_pays_organizer_even_when_prime_is_one(self):
        """Ticket 1 always seeds the organizer."""
        route = route_payment(1, 1, "platform-owner", "treasurer-venmo")
        assert route.recipient_kind is RecipientKind.ORGANIZER

    def test_rejects_zero_sequence(self):
        """Sequence numbers start at 1."""
        with pytest.raises(ValueError):
            route_payment(0, 11, "platform-owner", "treasurer-venmo")

    def test_rejects_non_positive_prime(self):
        """Owner prime must be at least 1."""
        with pytest.raises(ValueError):
            route_payment(5, 0, "platform-owner", "treasurer-venmo")

    def test_owner_share_percentage(self):
        """An owner prime of 11 gives roughly 9.09%."""
        assert owner_share_percentage(11) == Decimal("9.09")


class TestVenmoLink:
    """Tests for the prefilled payment link."""

    def test_link_carries_amount_and_note(self):
        """The link targets the recipient with amount and ticket note."""
        link = venmo_payment_link("treasurer-venmo", Money.of("10"), "SPR-20260314-0001")
        parts = urlsplit(link)
        query = parse_qs(parts.query)
        assert parts.netloc == "venmo.com"
        assert parts.path == "/treasurer-venmo"
        assert query == {
            "txn": ["pay"],
            "amount": ["10.00"],
            "note": ["FIFTYFIFTY-SPR-20260314-0001"],
            "audience": ["private"],
        }


class TestCleanVenmoHandle:
    """Tests for Venmo handle normalization."""

    def test_strips_at_sign(self):
        """A leading @ is dropped."""
        assert clean_venmo_handle("@player-001") == "player-001"

    @pytest.mark.parametrize("handle", [None, "", "abc", "has space", "x" * 31])
    def test_rejects_unusable_handles(self, handle):
        """Short, long or malformed handles are refused."""
        assert clean_venmo_handle(handle) is None
