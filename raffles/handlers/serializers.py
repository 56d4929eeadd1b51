"""Serializers for request validation and for rendering domain models."""

from rest_framework import serializers


class EnumValueField(serializers.Field):
    def to_representation(self, value):
        return value.value


class StrField(serializers.Field):
    def to_representation(self, value):
        return str(value)


class RaffleCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    beneficiary_name = serializers.CharField(max_length=255)
    ticket_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    ticket_prefix = serializers.CharField(max_length=10)
    max_tickets = serializers.IntegerField(required=False, min_value=1)
    min_tickets_enabled = serializers.BooleanField(required=False, default=False)
    min_tickets = serializers.IntegerField(required=False, min_value=1)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField()


class TicketPurchaseSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=254)
    venmo = serializers.CharField(max_length=64)
    state = serializers.CharField(max_length=2, min_length=2)


class PaymentProofSerializer(serializers.Serializer):
    txn_id = serializers.CharField(required=False, allow_blank=True, max_length=64)
    screenshot = serializers.CharField(required=False, allow_blank=True)


class TicketReviewSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=["approve", "reject"])


class RedrawRequestSerializer(serializers.Serializer):
    ticket_id = serializers.UUIDField()
    reason = serializers.CharField(required=False, allow_blank=True, default="")
    draw_number = serializers.IntegerField(required=False, min_value=1)


class ConfirmRequestSerializer(serializers.Serializer):
    ticket_id = serializers.UUIDField()
    draw_number = serializers.IntegerField(required=False, min_value=1)


class RaffleSerializer(serializers.Serializer):
    """Serializer for Raffle domain model."""

    id = StrField()
    name = serializers.CharField()
    beneficiary_name = serializers.CharField()
    ticket_prefix = serializers.CharField()
    ticket_price = StrField()
    max_tickets = serializers.IntegerField()
    tickets_sold = serializers.IntegerField()
    tickets_remaining = serializers.IntegerField()
    jackpot = StrField()
    owner_prime = serializers.IntegerField()
    min_tickets_enabled = serializers.BooleanField()
    min_tickets = serializers.IntegerField(allow_null=True)
    status = EnumValueField()
    redraw_count = serializers.IntegerField()
    winning_ticket_id = StrField(allow_null=True)
    drawn_at = serializers.DateTimeField(allow_null=True)
    payout_confirmed = serializers.BooleanField()


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = StrField()
    ticket_number = serializers.CharField()
    sequence_number = serializers.IntegerField()
    status = EnumValueField()
    payment_recipient = EnumValueField()
    player_email = serializers.CharField()
    player_venmo = serializers.CharField()
    venmo_txn_id = serializers.CharField(allow_null=True)
    screenshot = serializers.CharField(allow_null=True)


class IssuedTicketSerializer(serializers.Serializer):
    ticket = TicketSerializer()
    venmo_url = serializers.CharField(source="payment_link")
    recipient = serializers.CharField(source="recipient_handle")


class DrawCandidateSerializer(serializers.Serializer):
    ticket = TicketSerializer()
    draw_number = serializers.IntegerField()


class RedrawOutcomeSerializer(serializers.Serializer):
    new_ticket = TicketSerializer()
    draw_number = serializers.IntegerField()
    redraws_remaining = serializers.IntegerField()


class DrawLogLineSerializer(serializers.Serializer):
    draw_number = serializers.IntegerField()
    ticket_number = serializers.CharField()
    result = EnumValueField()
    reason = serializers.CharField(allow_null=True)
    timestamp = serializers.DateTimeField()


class DrawingStatusSerializer(serializers.Serializer):
    draw_count = serializers.IntegerField()
    redraws = serializers.IntegerField()
    redraws_remaining = serializers.IntegerField()
    max_redraws = serializers.IntegerField()
    needs_escalation = serializers.BooleanField()
    min_tickets_required = serializers.IntegerField(allow_null=True)
    draw_log = DrawLogLineSerializer(many=True)


class PayoutInfoSerializer(serializers.Serializer):
    raffle = RaffleSerializer()
    jackpot = StrField()
    winner = TicketSerializer(allow_null=True)


class OrganizerSummarySerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.CharField()
    venmo_handle = serializers.CharField()


class RecipientTotalSerializer(serializers.Serializer):
    recipient = EnumValueField()
    tickets = serializers.IntegerField()
    amount = StrField()


class SalesReportSerializer(serializers.Serializer):
    raffle = RaffleSerializer()
    organizer = OrganizerSummarySerializer(allow_null=True)
    gross = StrField()
    jackpot = StrField()
    owner_revenue = StrField()
    net_to_beneficiary = StrField()
    totals = RecipientTotalSerializer(many=True)
    tickets = TicketSerializer(many=True)
    winner = TicketSerializer(allow_null=True)
    draw_log = DrawLogLineSerializer(many=True)


class TicketLookupSerializer(serializers.Serializer):
    """Public view of a ticket; player contact details are left out."""

    ticket_number = serializers.CharField(source="ticket.ticket_number")
    status = EnumValueField(source="ticket.status")
    created_at = serializers.DateTimeField(source="ticket.created_at")
    raffle_id = StrField(source="raffle.id")
    raffle_name = serializers.CharField(source="raffle.name")
    beneficiary_name = serializers.CharField(source="raffle.beneficiary_name")
    raffle_status = EnumValueField(source="raffle.status")
    is_winner = serializers.BooleanField()
