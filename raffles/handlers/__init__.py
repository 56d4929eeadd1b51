from raffles.handlers.views import (
    ConfirmView,
    DrawStatusView,
    DrawView,
    PayoutView,
    PendingTicketsView,
    RaffleActivateView,
    RaffleCancelView,
    RaffleCreateView,
    RaffleDetailView,
    RaffleReportView,
    RedrawView,
    TicketLookupView,
    TicketPurchaseView,
    TicketReviewView,
    TicketVerifyView,
)

__all__ = [
    "ConfirmView",
    "DrawStatusView",
    "DrawView",
    "PayoutView",
    "PendingTicketsView",
    "RaffleActivateView",
    "RaffleCancelView",
    "RaffleCreateView",
    "RaffleDetailView",
    "RaffleReportView",
    "RedrawView",
    "TicketLookupView",
    "TicketPurchaseView",
    "TicketReviewView",
    "TicketVerifyView",
]
