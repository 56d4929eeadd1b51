"""Unpredictable selection of one eligible ticket.

Selection is a pure read. Logging the outcome and changing statuses is left
to the caller, so a candidate can be shown to the organizer before anything
is committed.
"""

import logging

from raffles.domain import RaffleId, Ticket
from raffles.services.ledger import TicketLedger
from raffles.services.sources import RandomSource

logger = logging.getLogger(__name__)


class InsecureRandomSourceError(ValueError):
    pass


class DrawEngine:
    def __init__(
        self,
        ledger: TicketLedger,
        random_source: RandomSource,
        allow_insecure: bool = False,
    ) -> None:
        if not random_source.is_secure:
            if not allow_insecure:
                raise InsecureRandomSourceError(
                    f"{random_source!r} is not cryptographically secure"
                )
            logger.warning(
                "Draw engine using weaker non-cryptographic random source %r", random_source
            )
        self._ledger = ledger
        self._random = random_source

    @property
    def is_secure(self) -> bool:
        return self._random.is_secure

    def select_ticket(self, raffle_id: RaffleId) -> Ticket | None:
        """Pick one eligible ticket uniformly at random, or None if there are none."""
        eligible = self._ledger.eligible_tickets(raffle_id)
        if not eligible:
            return None
        ticket = eligible[self._random.randbelow(len(eligible))]
        logger.debug(
            "Selected ticket %s of %d eligible for raffle %s",
            ticket.ticket_number,
            len(eligible),
            raffle_id,
        )
        return ticket
