"""Domain error codes for the raffles module.

Every error here is an expected, caller-recoverable condition. Handlers map
them to responses; nothing in this module represents an internal fault.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    PENDING_ACCOUNT_FORBIDDEN = "PENDING_ACCOUNT_FORBIDDEN"
    INVALID_STATE = "INVALID_STATE"
    BELOW_MINIMUM = "BELOW_MINIMUM"
    NO_ELIGIBLE_TICKETS = "NO_ELIGIBLE_TICKETS"
    MAX_REDRAWS_EXCEEDED = "MAX_REDRAWS_EXCEEDED"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_COMPLETE = "ALREADY_COMPLETE"
    INVALID_ID = "INVALID_ID"
    INVALID_INPUT = "INVALID_INPUT"
    SOLD_OUT = "SOLD_OUT"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def details(self) -> dict[str, Any]:
        """Structured payload a caller can render without parsing the message."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, **self.details()}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotAuthorizedError(DomainError):
    """Raised when the actor neither owns the raffle nor is the platform owner."""

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(code=ErrorCode.NOT_AUTHORIZED, message=message)


class PendingAccountForbiddenError(DomainError):
    """Raised when an organizer awaiting approval tries to draw, redraw or confirm."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.PENDING_ACCOUNT_FORBIDDEN,
            message=f"Your account is pending approval. You cannot {operation} until approved.",
        )
        self.operation = operation

    def details(self) -> dict[str, Any]:
        return {"operation": self.operation}


class InvalidStateError(DomainError):
    """Raised when a lifecycle guard rejects an operation."""

    def __init__(self, message: str, current: str | None = None) -> None:
        super().__init__(code=ErrorCode.INVALID_STATE, message=message)
        self.current = current

    def details(self) -> dict[str, Any]:
        return {"current_status": self.current} if self.current else {}


class BelowMinimumError(DomainError):
    """Raised when the minimum-ticket gate blocks a draw."""

    def __init__(self, required: int, sold: int) -> None:
        super().__init__(
            code=ErrorCode.BELOW_MINIMUM,
            message=f"Minimum of {required} tickets required. Currently sold: {sold}",
        )
        self.required = required
        self.sold = sold

    @property
    def shortfall(self) -> int:
        return self.required - self.sold

    def details(self) -> dict[str, Any]:
        return {"required": self.required, "sold": self.sold, "shortfall": self.shortfall}


class NoEligibleTicketsError(DomainError):
    """Raised when a draw or redraw finds nothing to pick."""

    def __init__(self, raffle_id: str, after_redraw: bool = False) -> None:
        message = "No eligible tickets remaining" if after_redraw else "No eligible tickets found"
        super().__init__(code=ErrorCode.NO_ELIGIBLE_TICKETS, message=message)
        self.raffle_id = raffle_id
        self.after_redraw = after_redraw

    def details(self) -> dict[str, Any]:
        return {"after_redraw": self.after_redraw}


class MaxRedrawsExceededError(DomainError):
    """Raised when the redraw cap is reached; owner intervention is required."""

    def __init__(self, max_redraws: int) -> None:
        super().__init__(
            code=ErrorCode.MAX_REDRAWS_EXCEEDED,
            message="Maximum redraws reached. Owner intervention required.",
        )
        self.max_redraws = max_redraws

    @property
    def needs_escalation(self) -> bool:
        return True

    def details(self) -> dict[str, Any]:
        return {"max_redraws": self.max_redraws, "needs_escalation": True}


class NotFoundError(DomainError):
    """Raised when a raffle, ticket or organizer does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=f"{kind} not found")
        self.kind = kind
        self.identifier = identifier

    def details(self) -> dict[str, Any]:
        return {"resource": self.kind}


class RaffleNotFoundError(NotFoundError):
    def __init__(self, raffle_id: str) -> None:
        super().__init__("Raffle", raffle_id)


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__("Ticket", ticket_id)


class AlreadyCompleteError(DomainError):
    """Raised on a second confirm of a raffle that already has a winner."""

    def __init__(self, raffle_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_COMPLETE,
            message="Raffle drawing is already complete",
        )
        self.raffle_id = raffle_id


class InvalidIdError(DomainError):
    """Raised when an ID is not a valid UUID."""

    def __init__(self, kind: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ID, message=f"Invalid {kind} ID format")


class InvalidInputError(DomainError):
    """Raised when caller-supplied raffle or ticket data is rejected."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)
        self.field = field

    def details(self) -> dict[str, Any]:
        return {"field": self.field} if self.field else {}


class SoldOutError(DomainError):
    def __init__(self, max_tickets: int) -> None:
        super().__init__(code=ErrorCode.SOLD_OUT, message="This raffle is sold out")
        self.max_tickets = max_tickets

    def details(self) -> dict[str, Any]:
        return {"max_tickets": self.max_tickets}
