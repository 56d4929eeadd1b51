from raffles.services.draw_engine import DrawEngine
from raffles.services.ledger import TicketLedger
from raffles.services.locks import RaffleBusyError, RaffleLocks
from raffles.services.orchestrator import RaffleOrchestrator
from raffles.services.raffle_service import RaffleService
from raffles.services.redraw_controller import RedrawController, WinnerConfirmation
from raffles.services.sources import SecureRandomSource, SeededRandomSource, SystemClock

__all__ = [
    "DrawEngine",
    "TicketLedger",
    "RaffleBusyError",
    "RaffleLocks",
    "RaffleOrchestrator",
    "RaffleService",
    "RedrawController",
    "WinnerConfirmation",
    "SecureRandomSource",
    "SeededRandomSource",
    "SystemClock",
]
