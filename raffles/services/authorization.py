"""Single authorization policy consulted before any lifecycle or engine logic."""

from raffles.domain import Organizer, Raffle
from raffles.domain.errors import NotAuthorizedError, PendingAccountForbiddenError


def ensure_approved(actor: Organizer, operation: str) -> None:
    """Pending organizers may sell tickets but may not draw, redraw or confirm."""
    if actor.is_pending:
        raise PendingAccountForbiddenError(operation)


def ensure_manages(actor: Organizer, raffle: Raffle) -> None:
    if actor.is_owner or raffle.organizer_id == actor.id:
        return
    raise NotAuthorizedError()

