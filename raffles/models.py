"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.db import models


class Organizer(models.Model):
    """Persistence model for organizer accounts, one per auth user."""

    class Role(models.TextChoices):
        OWNER = "Owner"
        ORGANIZER = "Organizer"

    class Status(models.TextChoices):
        PENDING = "Pending"
        APPROVED = "Approved"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organizer"
    )
    name = models.CharField(max_length=255)
    email = models.EmailField()
    venmo_handle = models.CharField(max_length=30)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.ORGANIZER)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    def __str__(self) -> str:
        return self.name


class Raffle(models.Model):
    """Persistence model for raffles."""

    class Status(models.TextChoices):
        DRAFT = "Draft"
        ACTIVE = "Active"
        DRAWING = "Drawing"
        COMPLETE = "Complete"
        CANCELLED = "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer = models.ForeignKey(Organizer, on_delete=models.PROTECT, related_name="raffles")
    name = models.CharField(max_length=255)
    beneficiary_name = models.CharField(max_length=255)
    ticket_prefix = models.CharField(max_length=10)
    organizer_venmo = models.CharField(max_length=30)
    ticket_price = models.DecimalField(max_digits=10, decimal_places=2)
    max_tickets = models.PositiveIntegerField()
    tickets_sold = models.PositiveIntegerField(default=0)
    owner_prime = models.PositiveIntegerField(default=11)
    min_tickets_enabled = models.BooleanField(default=False)
    min_tickets = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    redraw_count = models.PositiveIntegerField(default=0)
    winning_ticket = models.ForeignKey(
        "Ticket", on_delete=models.PROTECT, null=True, blank=True, related_name="+"
    )
    drawn_at = models.DateTimeField(null=True, blank=True)
    payout_confirmed = models.BooleanField(default=False)
    payout_confirmed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="raffle_status_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Ticket(models.Model):
    """Persistence model for tickets."""

    class Status(models.TextChoices):
        PENDING = "Pending"
        VERIFIED = "Verified"
        CONFIRMED = "Confirmed"
        INVALID = "Invalid"
        REJECTED = "Rejected"

    class Recipient(models.TextChoices):
        ORGANIZER = "Organizer"
        OWNER = "Owner"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    raffle = models.ForeignKey(Raffle, on_delete=models.PROTECT, related_name="tickets")
    sequence_number = models.PositiveIntegerField()
    ticket_number = models.CharField(max_length=32)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_recipient = models.CharField(max_length=20, choices=Recipient.choices)
    player_email = models.EmailField()
    player_venmo = models.CharField(max_length=30)
    venmo_txn_id = models.CharField(max_length=64, null=True, blank=True)
    screenshot = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField()
    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["sequence_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["raffle", "sequence_number"], name="unique_ticket_sequence"
            ),
            models.UniqueConstraint(
                fields=["raffle", "ticket_number"], name="unique_ticket_number"
            ),
        ]
        indexes = [
            models.Index(fields=["raffle", "status"], name="ticket_raffle_status_idx"),
            models.Index(fields=["ticket_number"], name="ticket_number_idx"),
        ]

    def __str__(self) -> str:
        return self.ticket_number


class DrawLogEntry(models.Model):
    """Append-only audit record of draw outcomes."""

    class Result(models.TextChoices):
        WINNER = "Winner"
        INVALID = "Invalid"

    raffle = models.ForeignKey(Raffle, on_delete=models.PROTECT, related_name="draw_log")
    ticket = models.ForeignKey(Ticket, on_delete=models.PROTECT, related_name="+")
    draw_number = models.PositiveIntegerField()
    result = models.CharField(max_length=10, choices=Result.choices)
    reason = models.TextField(blank=True, default="")
    timestamp = models.DateTimeField()

    class Meta:
        ordering = ["draw_number"]
        constraints = [
            models.UniqueConstraint(fields=["raffle", "draw_number"], name="unique_draw_number"),
            models.UniqueConstraint(
                fields=["raffle"],
                condition=models.Q(result="Winner"),
                name="single_winner_per_raffle",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.raffle_id} #{self.draw_number} {self.result}"


class PlatformSettings(models.Model):
    """Owner-managed overrides for the FIFTYFIFTY settings dict."""

    max_redraws = models.PositiveIntegerField(default=3)
    owner_venmo = models.CharField(max_length=30, blank=True, default="")
    auto_verify_tickets = models.BooleanField(default=True)

    class Meta:
        verbose_name_plural = "platform settings"

    def __str__(self) -> str:
        return f"max_redraws={self.max_redraws}"
