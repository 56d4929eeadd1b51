"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from raffles.domain import Organizer
from raffles.domain.errors import DomainError, ErrorCode, NotAuthorizedError
from raffles.handlers.dependencies import get_orchestrator, get_raffle_service, get_store
from raffles.handlers.serializers import (
    CancelSerializer,
    ConfirmRequestSerializer,
    DrawCandidateSerializer,
    DrawingStatusSerializer,
    IssuedTicketSerializer,
    PaymentProofSerializer,
    PayoutInfoSerializer,
    RaffleCreateSerializer,
    RaffleSerializer,
    RedrawOutcomeSerializer,
    RedrawRequestSerializer,
    SalesReportSerializer,
    TicketLookupSerializer,
    TicketPurchaseSerializer,
    TicketReviewSerializer,
    TicketSerializer,
)
from raffles.stores.interfaces import PersistenceError

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.PENDING_ACCOUNT_FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.ALREADY_COMPLETE: status.HTTP_409_CONFLICT,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": error.to_dict()},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


class RaffleAPIView(APIView):
    """Base view mapping domain errors and store failures to responses."""

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            return error_response(exc)
        if isinstance(exc, (PersistenceError, TimeoutError)):
            logger.exception("Request %s %s failed", self.request.method, self.request.path)
            return Response(
                {"error": {"code": "UNAVAILABLE", "message": "Please try again shortly"}},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return super().handle_exception(exc)

    def actor(self, request: Request) -> Organizer:
        organizer = get_store().get_organizer_for_user(request.user.pk)
        if organizer is None:
            raise NotAuthorizedError("No organizer profile for this account")
        return organizer


class RaffleCreateView(RaffleAPIView):
    """Handler for POST /api/raffles"""

    def post(self, request: Request) -> Response:
        data = RaffleCreateSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        raffle = get_raffle_service().create_raffle(self.actor(request), **data.validated_data)
        return Response(RaffleSerializer(raffle).data, status=status.HTTP_201_CREATED)


class RaffleDetailView(RaffleAPIView):
    """Handler for GET/DELETE /api/raffles/{raffle_id}"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return super().get_permissions()

    def get(self, request: Request, raffle_id: str) -> Response:
        return Response(RaffleSerializer(get_raffle_service().get_raffle(raffle_id)).data)

    def delete(self, request: Request, raffle_id: str) -> Response:
        get_raffle_service().delete(raffle_id, self.actor(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class RaffleActivateView(RaffleAPIView):
    """Handler for POST /api/raffles/{raffle_id}/activate"""

    def post(self, request: Request, raffle_id: str) -> Response:
        raffle = get_raffle_service().activate(raffle_id, self.actor(request))
        return Response(RaffleSerializer(raffle).data)


class RaffleCancelView(RaffleAPIView):
    """Handler for POST /api/raffles/{raffle_id}/cancel"""

    def post(self, request: Request, raffle_id: str) -> Response:
        data = CancelSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        raffle = get_raffle_service().cancel(
            raffle_id, data.validated_data["reason"], self.actor(request)
        )
        return Response(RaffleSerializer(raffle).data)


class TicketPurchaseView(RaffleAPIView):
    """Handler for POST /api/raffles/{raffle_id}/tickets"""

    permission_classes = [AllowAny]

    def post(self, request: Request, raffle_id: str) -> Response:
        data = TicketPurchaseSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        issued = get_raffle_service().purchase_ticket(raffle_id, **data.validated_data)
        return Response(IssuedTicketSerializer(issued).data, status=status.HTTP_201_CREATED)


class TicketVerifyView(RaffleAPIView):
    """Handler for POST /api/tickets/{ticket_id}/verify"""

    permission_classes = [AllowAny]

    def post(self, request: Request, ticket_id: str) -> Response:
        data = PaymentProofSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        ticket = get_raffle_service().submit_payment_proof(
            ticket_id,
            txn_id=data.validated_data.get("txn_id") or None,
            screenshot=data.validated_data.get("screenshot") or None,
        )
        return Response(TicketSerializer(ticket).data)


class TicketLookupView(RaffleAPIView):
    """Handler for GET /api/tickets/by-number/{ticket_number}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, ticket_number: str) -> Response:
        lookup = get_raffle_service().ticket_by_number(ticket_number)
        return Response(TicketLookupSerializer(lookup).data)


class PendingTicketsView(RaffleAPIView):
    """Handler for GET /api/raffles/{raffle_id}/pending-tickets"""

    def get(self, request: Request, raffle_id: str) -> Response:
        tickets = get_raffle_service().pending_tickets(raffle_id, self.actor(request))
        return Response({"tickets": TicketSerializer(tickets, many=True).data})


class TicketReviewView(RaffleAPIView):
    """Handler for POST /api/tickets/{ticket_id}/review"""

    def post(self, request: Request, ticket_id: str) -> Response:
        data = TicketReviewSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        ticket = get_raffle_service().review_ticket(
            ticket_id, data.validated_data["action"] == "approve", self.actor(request)
        )
        return Response(TicketSerializer(ticket).data)


class DrawView(RaffleAPIView):
    """Handler for POST /api/draw/{raffle_id}"""

    def post(self, request: Request, raffle_id: str) -> Response:
        candidate = get_orchestrator().execute_draw(raffle_id, self.actor(request))
        return Response(DrawCandidateSerializer(candidate).data)


class RedrawView(RaffleAPIView):
    """Handler for POST /api/draw/{raffle_id}/redraw"""

    def post(self, request: Request, raffle_id: str) -> Response:
        data = RedrawRequestSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        outcome = get_orchestrator().redraw(
            raffle_id,
            data.validated_data["ticket_id"],
            data.validated_data["reason"],
            self.actor(request),
            expected_draw_number=data.validated_data.get("draw_number"),
        )
        return Response(RedrawOutcomeSerializer(outcome).data)


class ConfirmView(RaffleAPIView):
    """Handler for POST /api/draw/{raffle_id}/confirm"""

    def post(self, request: Request, raffle_id: str) -> Response:
        data = ConfirmRequestSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        raffle = get_orchestrator().confirm(
            raffle_id,
            data.validated_data["ticket_id"],
            self.actor(request),
            expected_draw_number=data.validated_data.get("draw_number"),
        )
        return Response(RaffleSerializer(raffle).data)


class DrawStatusView(RaffleAPIView):
    """Handler for GET /api/draw/{raffle_id}/status"""

    def get(self, request: Request, raffle_id: str) -> Response:
        drawing = get_orchestrator().drawing_status(raffle_id, self.actor(request))
        return Response(DrawingStatusSerializer(drawing).data)


class PayoutView(RaffleAPIView):
    """Handler for GET/POST /api/raffles/{raffle_id}/payout"""

    def get(self, request: Request, raffle_id: str) -> Response:
        info = get_raffle_service().payout_info(raffle_id, self.actor(request))
        return Response(PayoutInfoSerializer(info).data)

    def post(self, request: Request, raffle_id: str) -> Response:
        raffle = get_raffle_service().confirm_payout(raffle_id, self.actor(request))
        return Response(RaffleSerializer(raffle).data)


class RaffleReportView(RaffleAPIView):
    """Handler for GET /api/raffles/{raffle_id}/report"""

    def get(self, request: Request, raffle_id: str) -> Response:
        report = get_raffle_service().sales_report(raffle_id, self.actor(request))
        return Response(SalesReportSerializer(report).data)
