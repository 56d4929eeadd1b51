from django.urls import path

from raffles.handlers import (
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

urlpatterns = [
    path("raffles", RaffleCreateView.as_view(), name="raffle-create"),
    path("raffles/<str:raffle_id>", RaffleDetailView.as_view(), name="raffle-detail"),
    path("raffles/<str:raffle_id>/activate", RaffleActivateView.as_view(), name="raffle-activate"),
    path("raffles/<str:raffle_id>/cancel", RaffleCancelView.as_view(), name="raffle-cancel"),
    path("raffles/<str:raffle_id>/tickets", TicketPurchaseView.as_view(), name="ticket-purchase"),
    path("raffles/<str:raffle_id>/payout", PayoutView.as_view(), name="raffle-payout"),
    path("raffles/<str:raffle_id>/report", RaffleReportView.as_view(), name="raffle-report"),
    path(
        "raffles/<str:raffle_id>/pending-tickets",
        PendingTicketsView.as_view(),
        name="raffle-pending-tickets",
    ),
    path(
        "tickets/by-number/<str:ticket_number>", TicketLookupView.as_view(), name="ticket-lookup"
    ),
    path("tickets/<str:ticket_id>/verify", TicketVerifyView.as_view(), name="ticket-verify"),
    path("tickets/<str:ticket_id>/review", TicketReviewView.as_view(), name="ticket-review"),
    path("draw/<str:raffle_id>", DrawView.as_view(), name="draw"),
    path("draw/<str:raffle_id>/redraw", RedrawView.as_view(), name="draw-redraw"),
    path("draw/<str:raffle_id>/confirm", ConfirmView.as_view(), name="draw-confirm"),
    path("draw/<str:raffle_id>/status", DrawStatusView.as_view(), name="draw-status"),
]
