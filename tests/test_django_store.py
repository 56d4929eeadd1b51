"""Integration tests for DjangoRaffleStore.

Run with: pytest tests/test_django_store.py -v
"""

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from django.contrib.auth import get_user_model
from django.db import OperationalError

from raffles import models as orm
from raffles.domain import (
    DrawLogEntry,
    DrawResult,
    Money,
    OrganizerId,
    Raffle,
    RaffleId,
    RaffleStatus,
    RecipientKind,
    Ticket,
    TicketId,
    TicketStatus,
)
from raffles.services import RaffleOrchestrator, RaffleService, SecureRandomSource
from raffles.stores import PersistenceError, PersistenceTimeout
from raffles.stores import django_store
from raffles.stores.django_store import DjangoRaffleStore, _is_timeout

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_store() -> DjangoRaffleStore:
    return DjangoRaffleStore()


@pytest.fixture
def db_organizer(db):
    user = get_user_model().objects.create_user("treasurer", password="s3cret-pass")
    return orm.Organizer.objects.create(
        user=user,
        name="Treasurer",
        email="treasurer@example.com",
        venmo_handle="treasurer-venmo",
        status=orm.Organizer.Status.APPROVED,
    )


@pytest.fixture
def saved_raffle(db_store, db_organizer) -> Raffle:
    return db_store.create_raffle(
        Raffle(
            id=RaffleId.new(),
            organizer_id=OrganizerId(db_organizer.id),
            name="Spring Fundraiser",
            beneficiary_name="Little League",
            ticket_prefix="SPR",
            organizer_venmo="treasurer-venmo",
            ticket_price=Money.of("10.00"),
            max_tickets=10,
            status=RaffleStatus.ACTIVE,
        )
    )


def make_ticket(raffle: Raffle, sequence_number: int, status=TicketStatus.VERIFIED) -> Ticket:
    return Ticket(
        id=TicketId.new(),
        raffle_id=raffle.id,
        sequence_number=sequence_number,
        ticket_number=f"SPR-20260314-{sequence_number:04d}",
        payment_recipient=RecipientKind.ORGANIZER,
        player_email=f"player{sequence_number}@example.com",
        player_venmo=f"player-{sequence_number:03d}",
        status=status,
        created_at=NOW,
    )


@pytest.mark.django_db
class TestRaffleRows:
    """Tests for raffle persistence."""

    def test_round_trip(self, db_store, saved_raffle):
        """A created raffle reads back as the same domain object."""
        loaded = db_store.get_raffle(saved_raffle.id)
        assert loaded.id == saved_raffle.id
        assert loaded.ticket_price == Money.of("10")
        assert loaded.status is RaffleStatus.ACTIVE
        assert loaded.created_at is not None

    def test_update_maps_domain_values(self, db_store, saved_raffle):
        """Enums and ids in a patch are stored as columns."""
        ticket = db_store.create_ticket(make_ticket(saved_raffle, 1))
        updated = db_store.update_raffle(
            saved_raffle.id,
            status=RaffleStatus.COMPLETE,
            winning_ticket_id=ticket.id,
            drawn_at=NOW,
        )
        assert updated.status is RaffleStatus.COMPLETE
        assert updated.winning_ticket_id == ticket.id

    def test_update_missing_raises(self, db_store):
        """Updating a raffle that does not exist is a persistence error."""
        with pytest.raises(PersistenceError):
            db_store.update_raffle(RaffleId.new(), tickets_sold=1)

    def test_unknown_raffle_is_none(self, db_store):
        """get_raffle returns None for unknown ids."""
        assert db_store.get_raffle(RaffleId.new()) is None


@pytest.mark.django_db
class TestTicketsAndLog:
    """Tests for tickets and the draw log."""

    def test_eligible_tickets_are_fresh_and_ordered(self, db_store, saved_raffle):
        """Only Verified and Confirmed tickets come back, by sequence."""
        db_store.create_ticket(make_ticket(saved_raffle, 2))
        db_store.create_ticket(make_ticket(saved_raffle, 1))
        pending = db_store.create_ticket(make_ticket(saved_raffle, 3, TicketStatus.PENDING))
        assert [t.sequence_number for t in db_store.eligible_tickets(saved_raffle.id)] == [1, 2]

        db_store.update_ticket(pending.id, status=TicketStatus.VERIFIED)
        assert len(db_store.eligible_tickets(saved_raffle.id)) == 3

    def test_draw_numbers_must_be_next(self, db_store, saved_raffle):
        """Appending out of order is refused."""
        ticket = db_store.create_ticket(make_ticket(saved_raffle, 1))
        with pytest.raises(PersistenceError):
            db_store.append_draw_log_entry(
                DrawLogEntry(
                    raffle_id=saved_raffle.id,
                    ticket_id=ticket.id,
                    draw_number=2,
                    result=DrawResult.WINNER,
                    timestamp=NOW,
                )
            )

    def test_log_reads_back_in_order(self, db_store, saved_raffle):
        """Entries come back by draw number with their reasons."""
        first = db_store.create_ticket(make_ticket(saved_raffle, 1))
        second = db_store.create_ticket(make_ticket(saved_raffle, 2))
        db_store.append_draw_log_entry(
            DrawLogEntry(saved_raffle.id, first.id, 1, DrawResult.INVALID, NOW, "no payment")
        )
        db_store.append_draw_log_entry(
            DrawLogEntry(saved_raffle.id, second.id, 2, DrawResult.WINNER, NOW)
        )
        log = db_store.draw_log(saved_raffle.id)
        assert [(e.draw_number, e.result, e.reason) for e in log] == [
            (1, DrawResult.INVALID, "no payment"),
            (2, DrawResult.WINNER, ""),
        ]
        assert db_store.draw_log_count(saved_raffle.id) == 2

    def test_atomic_rolls_back(self, db_store, saved_raffle):
        """A failing block leaves nothing behind."""
        with pytest.raises(RuntimeError):
            with db_store.atomic(saved_raffle.id):
                db_store.create_ticket(make_ticket(saved_raffle, 1))
                db_store.update_raffle(saved_raffle.id, tickets_sold=1)
                raise RuntimeError("boom")
        assert db_store.tickets_for_raffle(saved_raffle.id) == []
        assert db_store.get_raffle(saved_raffle.id).tickets_sold == 0

    def test_duplicate_sequence_is_persistence_error(self, db_store, saved_raffle):
        """The unique sequence constraint surfaces as PersistenceError."""
        db_store.create_ticket(make_ticket(saved_raffle, 1))
        with pytest.raises(PersistenceError):
            with db_store.atomic(saved_raffle.id):
                db_store.create_ticket(make_ticket(saved_raffle, 1))

    def test_same_number_in_two_raffles(self, db_store, saved_raffle):
        """Ticket numbers only need to be unique within their raffle."""
        twin = db_store.create_raffle(replace(saved_raffle, id=RaffleId.new()))
        db_store.create_ticket(make_ticket(saved_raffle, 1))
        with db_store.atomic(twin.id):
            db_store.create_ticket(make_ticket(twin, 1))
        assert [t.ticket_number for t in db_store.tickets_for_raffle(twin.id)] == [
            "SPR-20260314-0001"
        ]

    def test_duplicate_number_in_one_raffle_refused(self, db_store, saved_raffle):
        """Within a raffle the number stays unique even under a new sequence."""
        db_store.create_ticket(make_ticket(saved_raffle, 1))
        clash = replace(make_ticket(saved_raffle, 2), ticket_number="SPR-20260314-0001")
        with pytest.raises(PersistenceError):
            with db_store.atomic(saved_raffle.id):
                db_store.create_ticket(clash)

    def test_find_by_number_prefers_newest(self, db_store, saved_raffle):
        """A number shared by two raffles resolves to the latest ticket."""
        twin = db_store.create_raffle(replace(saved_raffle, id=RaffleId.new()))
        db_store.create_ticket(make_ticket(saved_raffle, 1))
        later = db_store.create_ticket(
            replace(make_ticket(twin, 1), created_at=NOW + timedelta(minutes=5))
        )
        assert db_store.find_ticket_by_number("SPR-20260314-0001").id == later.id
        assert db_store.find_ticket_by_number("SPR-20260314-0099") is None


class DriverError(Exception):
    def __init__(self, pgcode):
        super().__init__(pgcode)
        self.pgcode = pgcode


def driver_failure(message, pgcode=None):
    exc = OperationalError(message)
    exc.__cause__ = DriverError(pgcode)
    return exc


class RecordingConnection:
    """Stands in for a PostgreSQL connection and keeps the SQL it is given."""

    vendor = "postgresql"

    def __init__(self):
        self.statements = []

    @contextmanager
    def cursor(self):
        yield SimpleNamespace(execute=self.statements.append)


class TestTimeoutMapping:
    """Only lock and statement timeouts count as timeouts."""

    @pytest.mark.parametrize(
        "exc,expected",
        [
            (driver_failure("canceling statement due to lock timeout", "55P03"), True),
            (driver_failure("canceling statement due to statement timeout", "57014"), True),
            (OperationalError("database is locked"), True),
            (driver_failure("server closed the connection unexpectedly", "08006"), False),
            (OperationalError("no such table: raffles_ticket"), False),
        ],
    )
    def test_is_timeout(self, exc, expected):
        """Timeouts are recognized by SQLSTATE or by SQLite's lock message."""
        assert _is_timeout(exc) is expected

    @pytest.mark.django_db
    def test_other_operational_errors_are_not_timeouts(self, db_store, saved_raffle):
        """A dropped connection or missing table is a plain PersistenceError."""
        with pytest.raises(PersistenceError) as exc:
            with db_store.atomic(saved_raffle.id):
                raise OperationalError("no such table: raffles_ticket")
        assert not isinstance(exc.value, PersistenceTimeout)

    @pytest.mark.django_db
    def test_lock_timeout_is_persistence_timeout(self, db_store, saved_raffle):
        """A lock wait that gives up surfaces as PersistenceTimeout."""
        with pytest.raises(PersistenceTimeout):
            with db_store.atomic(saved_raffle.id):
                raise driver_failure("canceling statement due to lock timeout", "55P03")

    @pytest.mark.django_db
    def test_postgres_gets_lock_and_statement_timeouts(self, saved_raffle, monkeypatch):
        """Both timeouts are set for the transaction, in milliseconds."""
        recorder = RecordingConnection()
        monkeypatch.setattr(django_store, "connection", recorder)
        with DjangoRaffleStore(lock_timeout=2.5).atomic(saved_raffle.id):
            pass
        assert recorder.statements == [
            "SET LOCAL lock_timeout = 2500",
            "SET LOCAL statement_timeout = 2500",
        ]


@pytest.mark.django_db
class TestSettingsAndOrganizers:
    """Tests for platform settings and organizer lookups."""

    def test_settings_from_django_config(self, db_store, settings):
        """Without a row the FIFTYFIFTY dict supplies the values."""
        settings.FIFTYFIFTY = {"MAX_REDRAWS": 5, "OWNER_VENMO": "platform-owner", "OWNER_PRIME": 13}
        platform = db_store.get_settings()
        assert (platform.max_redraws, platform.owner_venmo, platform.owner_prime) == (
            5,
            "platform-owner",
            13,
        )

    def test_settings_row_overrides(self, db_store, settings):
        """An owner-edited row wins over the config dict."""
        settings.FIFTYFIFTY = {"MAX_REDRAWS": 5, "OWNER_VENMO": "platform-owner"}
        orm.PlatformSettings.objects.create(max_redraws=2, auto_verify_tickets=False)
        platform = db_store.get_settings()
        assert platform.max_redraws == 2
        assert platform.owner_venmo == "platform-owner"
        assert not platform.auto_verify_tickets

    def test_organizer_lookups(self, db_store, db_organizer):
        """Organizers resolve by id and by auth user."""
        by_id = db_store.get_organizer(OrganizerId(db_organizer.id))
        by_user = db_store.get_organizer_for_user(db_organizer.user_id)
        assert by_id == by_user
        assert not by_id.is_pending


@pytest.mark.django_db
class TestDrawingOnDatabase:
    """The drawing core runs unchanged on the ORM store."""

    def test_full_drawing(self, db_store, db_organizer, notifier, settings):
        """Sell, draw, redraw and confirm leave a consistent audit trail."""
        settings.FIFTYFIFTY = {"OWNER_VENMO": "platform-owner", "MAX_REDRAWS": 3}
        actor = db_store.get_organizer(OrganizerId(db_organizer.id))
        service = RaffleService(db_store, notifier)
        orchestrator = RaffleOrchestrator(db_store, notifier, random_source=SecureRandomSource())

        raffle = service.create_raffle(actor, "Spring Fundraiser", "Little League", "10", "SPR")
        service.activate(raffle.id, actor)
        for n in range(1, 6):
            service.purchase_ticket(raffle.id, f"p{n}@example.com", f"player-{n:03d}", "CA")

        first = orchestrator.execute_draw(raffle.id, actor)
        outcome = orchestrator.redraw(raffle.id, first.ticket.id, "no payment", actor)
        completed = orchestrator.confirm(raffle.id, outcome.new_ticket.id, actor)

        assert completed.status is RaffleStatus.COMPLETE
        assert completed.redraw_count == 1
        assert [(e.draw_number, e.result) for e in db_store.draw_log(raffle.id)] == [
            (1, DrawResult.INVALID),
            (2, DrawResult.WINNER),
        ]
        assert db_store.get_ticket(first.ticket.id).status is TicketStatus.INVALID
        assert db_store.get_ticket(outcome.new_ticket.id).status is TicketStatus.CONFIRMED

    def test_two_raffles_share_a_prefix(self, db_store, db_organizer, notifier, clock, settings):
        """Same-day raffles with one prefix both sell their first ticket."""
        settings.FIFTYFIFTY = {"OWNER_VENMO": "platform-owner"}
        actor = db_store.get_organizer(OrganizerId(db_organizer.id))
        service = RaffleService(db_store, notifier, clock=clock)

        numbers = []
        for name in ("Spring Fundraiser", "Spring Bake Sale"):
            raffle = service.create_raffle(actor, name, "Little League", "10", "SPR")
            service.activate(raffle.id, actor)
            issued = service.purchase_ticket(raffle.id, "p1@example.com", "player-001", "CA")
            numbers.append(issued.ticket.ticket_number)
            clock.current += timedelta(minutes=1)

        assert numbers == ["SPR-20260314-0001", "SPR-20260314-0001"]
        assert service.ticket_by_number("spr-20260314-0001").raffle.name == "Spring Bake Sale"
