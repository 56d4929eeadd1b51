"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest
from rest_framework.test import APIClient

from raffles.domain import AccountStatus, Organizer, OrganizerId, PlatformSettings, Role
from raffles.notifiers import Notifier
from raffles.services import RaffleLocks, RaffleOrchestrator, RaffleService, SeededRandomSource
from raffles.stores import InMemoryRaffleStore


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


class RecordingNotifier(Notifier):
    """Keeps every notification as a (name, args) pair."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, tuple]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.sent]

    def notify_winner(self, ticket, raffle):
        self.sent.append(("winner", (ticket, raffle)))

    def notify_payout_due(self, organizer, raffle, ticket):
        self.sent.append(("payout_due", (organizer, raffle, ticket)))

    def notify_players_of_result(self, raffle, draw_log, winning_ticket, tickets):
        self.sent.append(("players_of_result", (raffle, draw_log, winning_ticket, tickets)))

    def notify_draw_started(self, raffle):
        self.sent.append(("draw_started", (raffle,)))

    def notify_ticket_invalidated(self, ticket, raffle, reason):
        self.sent.append(("ticket_invalidated", (ticket, raffle, reason)))

    def notify_ticket_issued(self, ticket, raffle, payment_link):
        self.sent.append(("ticket_issued", (ticket, raffle, payment_link)))

    def notify_raffle_cancelled(self, raffle, tickets, reason):
        self.sent.append(("raffle_cancelled", (raffle, tickets, reason)))


class FailingNotifier(Notifier):
    """Every notification fails as if the mail server were down."""

    def notify_winner(self, ticket, raffle):
        raise ConnectionError("mail server unreachable")

    def notify_payout_due(self, organizer, raffle, ticket):
        raise ConnectionError("mail server unreachable")

    def notify_players_of_result(self, raffle, draw_log, winning_ticket, tickets):
        raise ConnectionError("mail server unreachable")

    def notify_draw_started(self, raffle):
        raise ConnectionError("mail server unreachable")

    def notify_ticket_invalidated(self, ticket, raffle, reason):
        raise ConnectionError("mail server unreachable")

    def notify_ticket_issued(self, ticket, raffle, payment_link):
        raise ConnectionError("mail server unreachable")

    def notify_raffle_cancelled(self, raffle, tickets, reason):
        raise ConnectionError("mail server unreachable")


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def platform_settings() -> PlatformSettings:
    return PlatformSettings(max_redraws=3, owner_venmo="platform-owner", owner_prime=11)


@pytest.fixture
def store(platform_settings) -> InMemoryRaffleStore:
    return InMemoryRaffleStore(settings=platform_settings)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()


@pytest.fixture
def random_source() -> SeededRandomSource:
    return SeededRandomSource(1234)


@pytest.fixture
def locks() -> RaffleLocks:
    return RaffleLocks()


def _organizer(store, name, role=Role.ORGANIZER, status=AccountStatus.APPROVED):
    return store.add_organizer(
        Organizer(
            id=OrganizerId.new(),
            name=name,
            email=f"{name.lower()}@example.com",
            venmo_handle=f"{name.lower()}-venmo",
            role=role,
            status=status,
        )
    )


@pytest.fixture
def organizer(store) -> Organizer:
    return _organizer(store, "Treasurer")


@pytest.fixture
def other_organizer(store) -> Organizer:
    return _organizer(store, "Stranger")


@pytest.fixture
def pending_organizer(store) -> Organizer:
    return _organizer(store, "Newcomer", status=AccountStatus.PENDING)


@pytest.fixture
def owner(store) -> Organizer:
    return _organizer(store, "Platform", role=Role.OWNER)


@pytest.fixture
def service(store, notifier, clock, locks) -> RaffleService:
    return RaffleService(store, notifier, clock=clock, locks=locks)


@pytest.fixture
def orchestrator(store, notifier, random_source, clock, locks) -> RaffleOrchestrator:
    return RaffleOrchestrator(
        store,
        notifier,
        random_source=random_source,
        clock=clock,
        locks=locks,
        allow_insecure_random=True,
    )


@pytest.fixture
def raffle_factory(service, organizer):
    """Create an Active raffle owned by ``organizer`` with ``tickets`` sold."""

    def create(tickets=0, ticket_price="10", max_tickets=10, activate=True, **kwargs):
        raffle = service.create_raffle(
            organizer,
            name="Spring Fundraiser",
            beneficiary_name="Little League",
            ticket_price=ticket_price,
            ticket_prefix="SPR",
            max_tickets=max_tickets,
            **kwargs,
        )
        if activate:
            service.activate(raffle.id, organizer)
        for n in range(1, tickets + 1):
            service.purchase_ticket(raffle.id, f"player{n}@example.com", f"player-{n:03d}", "CA")
        return service.get_raffle(raffle.id)

    return create
