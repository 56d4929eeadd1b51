"""Raffle orchestrator - the drawing operations exposed to handlers.

Services:
- Depend only on interfaces (stores, notifiers)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Each operation runs under the raffle's lock, so draw, redraw and confirm on
one raffle are serialized while different raffles proceed in parallel.
Notifications go out after the writes are committed and can never fail the
operation.
"""

import logging
from collections.abc import Callable, Iterator
from concurrent.futures import Executor
from contextlib import contextmanager
from uuid import UUID

from raffles.domain import (
    DrawCandidate,
    DrawingStatus,
    DrawLogLine,
    Organizer,
    Raffle,
    RaffleId,
    RaffleStatus,
    RedrawOutcome,
    Ticket,
    TicketId,
)
from raffles.domain.errors import (
    InvalidIdError,
    MaxRedrawsExceededError,
    NoEligibleTicketsError,
    RaffleNotFoundError,
    TicketNotFoundError,
)
from raffles.domain.lifecycle import check_can_draw, transition
from raffles.notifiers.interfaces import Notifier
from raffles.services.authorization import ensure_approved, ensure_manages
from raffles.services.draw_engine import DrawEngine
from raffles.services.ledger import TicketLedger
from raffles.services.locks import RaffleLocks
from raffles.services.redraw_controller import (
    DEFAULT_REDRAW_REASON,
    RedrawController,
    WinnerConfirmation,
)
from raffles.services.sources import Clock, RandomSource, SecureRandomSource, SystemClock
from raffles.stores.interfaces import PersistenceError, RaffleStore

logger = logging.getLogger(__name__)


def parse_raffle_id(value: str | RaffleId) -> RaffleId:
    if isinstance(value, RaffleId):
        return value
    try:
        return RaffleId.from_string(str(value))
    except ValueError:
        raise InvalidIdError("raffle") from None


def parse_ticket_id(value: str | TicketId | UUID) -> TicketId:
    if isinstance(value, TicketId):
        return value
    if isinstance(value, UUID):
        return TicketId(value)
    try:
        return TicketId.from_string(str(value))
    except ValueError:
        raise InvalidIdError("ticket") from None


def draw_log_lines(store: RaffleStore, raffle_id: RaffleId) -> list[DrawLogLine]:
    numbers = {t.id: t.ticket_number for t in store.tickets_for_raffle(raffle_id)}
    return [
        DrawLogLine(
            draw_number=entry.draw_number,
            ticket_number=numbers.get(entry.ticket_id, "Unknown"),
            result=entry.result,
            reason=entry.reason or None,
            timestamp=entry.timestamp,
        )
        for entry in store.draw_log(raffle_id)
    ]


class RaffleOrchestrator:
    """Service for the draw, redraw and confirm operations."""

    def __init__(
        self,
        store: RaffleStore,
        notifier: Notifier,
        random_source: RandomSource | None = None,
        clock: Clock | None = None,
        locks: RaffleLocks | None = None,
        timeout: float | None = None,
        dispatcher: Executor | None = None,
        allow_insecure_random: bool = False,
    ) -> None:
        clock = clock or SystemClock()
        self._store = store
        self._notifier = notifier
        self._locks = locks or RaffleLocks()
        self._timeout = timeout
        self._dispatcher = dispatcher
        self._ledger = TicketLedger(store, clock)
        self._engine = DrawEngine(
            self._ledger,
            random_source or SecureRandomSource(),
            allow_insecure=allow_insecure_random,
        )
        self._redraws = RedrawController(store, self._engine, clock)
        self._confirmations = WinnerConfirmation(store, clock)

    @contextmanager
    def _exclusive(self, raffle_id: RaffleId, operation: str) -> Iterator[None]:
        try:
            with self._locks.hold(raffle_id, self._timeout):
                yield
        except (PersistenceError, TimeoutError):
            logger.exception("%s failed for raffle %s", operation, raffle_id)
            raise

    def _notify(self, send: Callable[..., None], *args) -> None:
        def deliver() -> None:
            try:
                send(*args)
            except Exception:
                logger.exception("Notification %s failed", getattr(send, "__name__", send))

        if self._dispatcher is None:
            deliver()
        else:
            self._dispatcher.submit(deliver)

    def _require_raffle(self, raffle_id: RaffleId) -> Raffle:
        raffle = self._store.get_raffle(raffle_id)
        if raffle is None:
            raise RaffleNotFoundError(str(raffle_id))
        return raffle

    def _require_ticket(self, ticket_id: TicketId) -> Ticket:
        ticket = self._store.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(str(ticket_id))
        return ticket

    def execute_draw(self, raffle_id: str | RaffleId, actor: Organizer) -> DrawCandidate:
        """Select a candidate winner without committing it to the draw log.

        Raises:
            PendingAccountForbiddenError: If the actor's account awaits approval.
            NotAuthorizedError: If the actor does not manage the raffle.
            InvalidStateError: If the raffle is not Active or Drawing.
            BelowMinimumError: If the minimum-ticket gate is not met.
            MaxRedrawsExceededError: If the redraw cap is already spent.
            NoEligibleTicketsError: If there is nothing to pick.
        """
        ensure_approved(actor, "execute drawings")
        rid = parse_raffle_id(raffle_id)
        started = None
        with self._exclusive(rid, "Draw"):
            with self._store.atomic(rid):
                raffle = self._require_raffle(rid)
                ensure_manages(actor, raffle)
                check_can_draw(raffle)
                settings = self._store.get_settings()
                if raffle.redraw_count >= settings.max_redraws:
                    raise MaxRedrawsExceededError(settings.max_redraws)

                if raffle.status is RaffleStatus.ACTIVE:
                    raffle = self._store.update_raffle(
                        rid, status=transition(raffle, RaffleStatus.DRAWING)
                    )
                    started = raffle
                ticket = self._engine.select_ticket(rid)
                if ticket is None:
                    raise NoEligibleTicketsError(str(rid))
                candidate = DrawCandidate(
                    ticket=ticket, draw_number=self._store.draw_log_count(rid) + 1
                )

        logger.info(
            "Draw %d candidate for raffle %s: ticket %s",
            candidate.draw_number,
            rid,
            ticket.ticket_number,
        )
        if started is not None:
            self._notify(self._notifier.notify_draw_started, started)
        return candidate

    def redraw(
        self,
        raffle_id: str | RaffleId,
        ticket_id: str | TicketId,
        reason: str | None,
        actor: Organizer,
        expected_draw_number: int | None = None,
    ) -> RedrawOutcome:
        """Invalidate the current candidate and pick another.

        Raises:
            MaxRedrawsExceededError: If the redraw cap is spent (escalate to owner).
            NoEligibleTicketsError: If nothing remains after invalidation; the
                attempt is still counted.
        """
        ensure_approved(actor, "redraw")
        rid = parse_raffle_id(raffle_id)
        tid = parse_ticket_id(ticket_id)
        with self._exclusive(rid, "Redraw"):
            raffle = self._require_raffle(rid)
            ensure_manages(actor, raffle)
            ticket = self._require_ticket(tid)
            try:
                outcome = self._redraws.redraw(
                    raffle, ticket, reason or DEFAULT_REDRAW_REASON, expected_draw_number
                )
            except NoEligibleTicketsError:
                invalidated = self._store.get_ticket(tid) or ticket
                self._notify(
                    self._notifier.notify_ticket_invalidated,
                    invalidated,
                    self._require_raffle(rid),
                    reason or DEFAULT_REDRAW_REASON,
                )
                raise

        invalidated = self._store.get_ticket(tid) or ticket
        self._notify(
            self._notifier.notify_ticket_invalidated,
            invalidated,
            outcome.raffle,
            outcome.invalidated.reason,
        )
        return outcome

    def confirm(
        self,
        raffle_id: str | RaffleId,
        ticket_id: str | TicketId,
        actor: Organizer,
        expected_draw_number: int | None = None,
    ) -> Raffle:
        """Commit the winner and complete the raffle.

        Raises:
            AlreadyCompleteError: If the raffle already has a confirmed winner.
            InvalidStateError: If the raffle is not Drawing or the draw is stale.
        """
        ensure_approved(actor, "confirm winners")
        rid = parse_raffle_id(raffle_id)
        tid = parse_ticket_id(ticket_id)
        with self._exclusive(rid, "Confirm"):
            raffle = self._require_raffle(rid)
            ensure_manages(actor, raffle)
            ticket = self._require_ticket(tid)
            raffle = self._confirmations.confirm(raffle, ticket, expected_draw_number)

        winner = self._store.get_ticket(tid) or ticket
        self._notify(self._notifier.notify_winner, winner, raffle)
        organizer = self._store.get_organizer(raffle.organizer_id)
        if organizer is None:
            logger.warning("Raffle %s has no organizer record; payout notice skipped", rid)
        else:
            self._notify(self._notifier.notify_payout_due, organizer, raffle, winner)
        self._notify(
            self._notifier.notify_players_of_result,
            raffle,
            draw_log_lines(self._store, rid),
            winner,
            self._store.tickets_for_raffle(rid),
        )
        return raffle

    def drawing_status(self, raffle_id: str | RaffleId, actor: Organizer) -> DrawingStatus:
        rid = parse_raffle_id(raffle_id)
        raffle = self._require_raffle(rid)
        ensure_manages(actor, raffle)
        settings = self._store.get_settings()
        lines = draw_log_lines(self._store, rid)
        return DrawingStatus(
            draw_count=len(lines),
            redraws=raffle.redraw_count,
            redraws_remaining=max(0, settings.max_redraws - raffle.redraw_count),
            max_redraws=settings.max_redraws,
            needs_escalation=raffle.redraw_count >= settings.max_redraws,
            min_tickets_required=raffle.required_minimum if raffle.min_tickets_enabled else None,
            draw_log=tuple(lines),
        )
