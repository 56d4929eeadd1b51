"""Django ORM implementation of the RaffleStore."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import fields
from enum import Enum
from typing import Any

from django.conf import settings as django_settings
from django.db import DatabaseError, OperationalError, connection, transaction
from django.utils import timezone

from raffles import models as orm
from raffles.domain import (
    AccountStatus,
    DrawLogEntry,
    DrawResult,
    Money,
    Organizer,
    OrganizerId,
    PlatformSettings,
    Raffle,
    RaffleId,
    RaffleStatus,
    RecipientKind,
    Role,
    Ticket,
    TicketId,
    TicketStatus,
)
from raffles.stores.interfaces import PersistenceError, PersistenceTimeout, RaffleStore

ELIGIBLE = [TicketStatus.VERIFIED.value, TicketStatus.CONFIRMED.value]

# PostgreSQL lock_not_available and query_canceled
TIMEOUT_SQLSTATES = {"55P03", "57014"}


def _column(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (RaffleId, TicketId, OrganizerId)):
        return value.value
    if isinstance(value, Money):
        return value.amount
    return value


def _columns(entity: Any) -> dict[str, Any]:
    return {f.name: _column(getattr(entity, f.name)) for f in fields(entity)}


def _to_organizer(record: orm.Organizer) -> Organizer:
    return Organizer(
        id=OrganizerId(record.id),
        name=record.name,
        email=record.email,
        venmo_handle=record.venmo_handle,
        role=Role(record.role),
        status=AccountStatus(record.status),
    )


def _to_raffle(record: orm.Raffle) -> Raffle:
    return Raffle(
        id=RaffleId(record.id),
        organizer_id=OrganizerId(record.organizer_id),
        name=record.name,
        beneficiary_name=record.beneficiary_name,
        ticket_prefix=record.ticket_prefix,
        organizer_venmo=record.organizer_venmo,
        ticket_price=Money(record.ticket_price),
        max_tickets=record.max_tickets,
        tickets_sold=record.tickets_sold,
        owner_prime=record.owner_prime,
        min_tickets_enabled=record.min_tickets_enabled,
        min_tickets=record.min_tickets,
        status=RaffleStatus(record.status),
        redraw_count=record.redraw_count,
        winning_ticket_id=TicketId(record.winning_ticket_id) if record.winning_ticket_id else None,
        drawn_at=record.drawn_at,
        payout_confirmed=record.payout_confirmed,
        payout_confirmed_at=record.payout_confirmed_at,
        created_at=record.created_at,
    )


def _to_ticket(record: orm.Ticket) -> Ticket:
    return Ticket(
        id=TicketId(record.id),
        raffle_id=RaffleId(record.raffle_id),
        sequence_number=record.sequence_number,
        ticket_number=record.ticket_number,
        payment_recipient=RecipientKind(record.payment_recipient),
        player_email=record.player_email,
        player_venmo=record.player_venmo,
        status=TicketStatus(record.status),
        venmo_txn_id=record.venmo_txn_id,
        screenshot=record.screenshot,
        created_at=record.created_at,
        verified_at=record.verified_at,
    )


def _is_timeout(exc: OperationalError) -> bool:
    """True when the driver reports a lock wait or statement timeout."""
    cause = exc.__cause__
    code = getattr(cause, "pgcode", None) or getattr(cause, "sqlstate", None)
    if code in TIMEOUT_SQLSTATES:
        return True
    return "database is locked" in str(exc)


def _to_entry(record: orm.DrawLogEntry) -> DrawLogEntry:
    return DrawLogEntry(
        raffle_id=RaffleId(record.raffle_id),
        ticket_id=TicketId(record.ticket_id),
        draw_number=record.draw_number,
        result=DrawResult(record.result),
        reason=record.reason,
        timestamp=record.timestamp,
    )


class DjangoRaffleStore(RaffleStore):
    """PostgreSQL-backed raffle store using Django ORM."""

    def __init__(self, lock_timeout: float | None = None) -> None:
        self._lock_timeout = lock_timeout

    @contextmanager
    def atomic(self, raffle_id: RaffleId) -> Iterator[None]:
        try:
            with transaction.atomic():
                if self._lock_timeout is not None and connection.vendor == "postgresql":
                    millis = int(self._lock_timeout * 1000)
                    with connection.cursor() as cursor:
                        cursor.execute(f"SET LOCAL lock_timeout = {millis}")
                        cursor.execute(f"SET LOCAL statement_timeout = {millis}")
                # Row lock on the raffle; a no-op on SQLite, which serializes writers anyway.
                list(
                    orm.Raffle.objects.select_for_update()
                    .filter(pk=raffle_id.value)
                    .values_list("pk", flat=True)
                )
                yield
        except OperationalError as exc:
            if _is_timeout(exc):
                raise PersistenceTimeout(f"Timed out on raffle {raffle_id}") from exc
            raise PersistenceError(f"Database unavailable for raffle {raffle_id}") from exc
        except DatabaseError as exc:
            raise PersistenceError(f"Write failed for raffle {raffle_id}") from exc

    def get_raffle(self, raffle_id: RaffleId) -> Raffle | None:
        record = orm.Raffle.objects.filter(pk=raffle_id.value).first()
        return _to_raffle(record) if record else None

    def create_raffle(self, raffle: Raffle) -> Raffle:
        record = orm.Raffle.objects.create(**_columns(raffle))
        return _to_raffle(record)

    def update_raffle(self, raffle_id: RaffleId, **changes: Any) -> Raffle:
        columns = {name: _column(value) for name, value in changes.items()}
        if not orm.Raffle.objects.filter(pk=raffle_id.value).update(**columns):
            raise PersistenceError(f"Raffle {raffle_id} does not exist")
        return self.get_raffle(raffle_id)

    def delete_raffle(self, raffle_id: RaffleId) -> None:
        orm.Raffle.objects.filter(pk=raffle_id.value).delete()

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        record = orm.Ticket.objects.filter(pk=ticket_id.value).first()
        return _to_ticket(record) if record else None

    def find_ticket_by_number(self, ticket_number: str) -> Ticket | None:
        record = (
            orm.Ticket.objects.filter(ticket_number=ticket_number).order_by("-created_at").first()
        )
        return _to_ticket(record) if record else None

    def create_ticket(self, ticket: Ticket) -> Ticket:
        columns = _columns(ticket)
        columns["created_at"] = columns["created_at"] or timezone.now()
        return _to_ticket(orm.Ticket.objects.create(**columns))

    def update_ticket(self, ticket_id: TicketId, **changes: Any) -> Ticket:
        columns = {name: _column(value) for name, value in changes.items()}
        if not orm.Ticket.objects.filter(pk=ticket_id.value).update(**columns):
            raise PersistenceError(f"Ticket {ticket_id} does not exist")
        return self.get_ticket(ticket_id)

    def tickets_for_raffle(self, raffle_id: RaffleId) -> list[Ticket]:
        records = orm.Ticket.objects.filter(raffle_id=raffle_id.value).order_by("sequence_number")
        return [_to_ticket(r) for r in records]

    def eligible_tickets(self, raffle_id: RaffleId) -> list[Ticket]:
        records = orm.Ticket.objects.filter(
            raffle_id=raffle_id.value, status__in=ELIGIBLE
        ).order_by("sequence_number")
        return [_to_ticket(r) for r in records]

    def append_draw_log_entry(self, entry: DrawLogEntry) -> DrawLogEntry:
        expected = self.draw_log_count(entry.raffle_id) + 1
        if entry.draw_number != expected:
            raise PersistenceError(
                f"Draw number {entry.draw_number} is not next for raffle {entry.raffle_id}"
            )
        record = orm.DrawLogEntry.objects.create(**_columns(entry))
        return _to_entry(record)

    def draw_log(self, raffle_id: RaffleId) -> list[DrawLogEntry]:
        records = orm.DrawLogEntry.objects.filter(raffle_id=raffle_id.value).order_by("draw_number")
        return [_to_entry(r) for r in records]

    def draw_log_count(self, raffle_id: RaffleId) -> int:
        return orm.DrawLogEntry.objects.filter(raffle_id=raffle_id.value).count()

    def get_settings(self) -> PlatformSettings:
        config = getattr(django_settings, "FIFTYFIFTY", {})
        defaults = PlatformSettings(
            max_redraws=config.get("MAX_REDRAWS", 3),
            owner_venmo=config.get("OWNER_VENMO", ""),
            owner_prime=config.get("OWNER_PRIME", 11),
            auto_verify_tickets=config.get("AUTO_VERIFY_TICKETS", True),
        )
        record = orm.PlatformSettings.objects.first()
        if record is None:
            return defaults
        return PlatformSettings(
            max_redraws=record.max_redraws,
            owner_venmo=record.owner_venmo or defaults.owner_venmo,
            owner_prime=defaults.owner_prime,
            auto_verify_tickets=record.auto_verify_tickets,
        )

    def get_organizer(self, organizer_id: OrganizerId) -> Organizer | None:
        record = orm.Organizer.objects.filter(pk=organizer_id.value).first()
        return _to_organizer(record) if record else None

    def get_organizer_for_user(self, user_id: int) -> Organizer | None:
        record = orm.Organizer.objects.filter(user_id=user_id).first()
        return _to_organizer(record) if record else None
