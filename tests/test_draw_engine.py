"""Unit tests for DrawEngine selection and random source policy.

Run with: pytest tests/test_draw_engine.py -v
"""

import logging
from collections import Counter

import pytest

from raffles.domain import PlatformSettings, TicketStatus
from raffles.services import DrawEngine, SecureRandomSource, SeededRandomSource, TicketLedger
from raffles.services.draw_engine import InsecureRandomSourceError


@pytest.fixture
def ledger(store, clock) -> TicketLedger:
    return TicketLedger(store, clock)


class TestRandomSourcePolicy:
    """The engine refuses predictable randomness unless explicitly allowed."""

    def test_secure_source_accepted(self, ledger):
        """The OS CSPRNG needs no opt-in."""
        assert DrawEngine(ledger, SecureRandomSource()).is_secure

    def test_seeded_source_refused_by_default(self, ledger):
        """A seeded source raises without allow_insecure."""
        with pytest.raises(InsecureRandomSourceError):
            DrawEngine(ledger, SeededRandomSource(7))

    def test_seeded_source_allowed_with_warning(self, ledger, caplog):
        """Opting in works and leaves a warning in the log."""
        with caplog.at_level(logging.WARNING, logger="raffles.services.draw_engine"):
            engine = DrawEngine(ledger, SeededRandomSource(7), allow_insecure=True)
        assert not engine.is_secure
        assert "non-cryptographic" in caplog.text


class TestSelectTicket:
    """Tests for select_ticket."""

    def test_selection_is_roughly_uniform(self, ledger, raffle_factory):
        """Each of five tickets wins about a fifth of many draws."""
        raffle = raffle_factory(tickets=5)
        engine = DrawEngine(ledger, SeededRandomSource(2026), allow_insecure=True)
        counts = Counter(engine.select_ticket(raffle.id).sequence_number for _ in range(5000))
        assert set(counts) == {1, 2, 3, 4, 5}
        for seen in counts.values():
            assert 850 <= seen <= 1150

    def test_only_eligible_tickets_are_selected(self, ledger, store, raffle_factory):
        """Pending, Invalid and Rejected tickets are never picked."""
        raffle = raffle_factory(tickets=4)
        tickets = store.tickets_for_raffle(raffle.id)
        store.update_ticket(tickets[0].id, status=TicketStatus.INVALID)
        store.update_ticket(tickets[1].id, status=TicketStatus.REJECTED)
        store.update_ticket(tickets[2].id, status=TicketStatus.PENDING)
        engine = DrawEngine(ledger, SecureRandomSource())
        picks = {engine.select_ticket(raffle.id).id for _ in range(200)}
        assert picks == {tickets[3].id}

    def test_no_eligible_returns_none(self, ledger, store, platform_settings, raffle_factory):
        """With only Pending tickets the engine finds nothing."""
        store.set_settings(
            PlatformSettings(owner_venmo=platform_settings.owner_venmo, auto_verify_tickets=False)
        )
        raffle = raffle_factory(tickets=3)
        assert DrawEngine(ledger, SecureRandomSource()).select_ticket(raffle.id) is None
