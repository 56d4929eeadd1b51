import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PlatformSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("max_redraws", models.PositiveIntegerField(default=3)),
                ("owner_venmo", models.CharField(blank=True, default="", max_length=30)),
                ("auto_verify_tickets", models.BooleanField(default=True)),
            ],
            options={
                "verbose_name_plural": "platform settings",
            },
        ),
        migrations.CreateModel(
            name="Organizer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254)),
                ("venmo_handle", models.CharField(max_length=30)),
                ("role", models.CharField(choices=[("Owner", "Owner"), ("Organizer", "Organizer")], default="Organizer", max_length=20)),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("Approved", "Approved")], default="Pending", max_length=20)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="organizer", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="Raffle",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("beneficiary_name", models.CharField(max_length=255)),
                ("ticket_prefix", models.CharField(max_length=10)),
                ("organizer_venmo", models.CharField(max_length=30)),
                ("ticket_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("max_tickets", models.PositiveIntegerField()),
                ("tickets_sold", models.PositiveIntegerField(default=0)),
                ("owner_prime", models.PositiveIntegerField(default=11)),
                ("min_tickets_enabled", models.BooleanField(default=False)),
                ("min_tickets", models.PositiveIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=[("Draft", "Draft"), ("Active", "Active"), ("Drawing", "Drawing"), ("Complete", "Complete"), ("Cancelled", "Cancelled")], default="Draft", max_length=20)),
                ("redraw_count", models.PositiveIntegerField(default=0)),
                ("drawn_at", models.DateTimeField(blank=True, null=True)),
                ("payout_confirmed", models.BooleanField(default=False)),
                ("payout_confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("organizer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="raffles", to="raffles.organizer")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status"], name="raffle_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sequence_number", models.PositiveIntegerField()),
                ("ticket_number", models.CharField(max_length=32)),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("Verified", "Verified"), ("Confirmed", "Confirmed"), ("Invalid", "Invalid"), ("Rejected", "Rejected")], default="Pending", max_length=20)),
                ("payment_recipient", models.CharField(choices=[("Organizer", "Organizer"), ("Owner", "Owner")], max_length=20)),
                ("player_email", models.EmailField(max_length=254)),
                ("player_venmo", models.CharField(max_length=30)),
                ("venmo_txn_id", models.CharField(blank=True, max_length=64, null=True)),
                ("screenshot", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                ("raffle", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="tickets", to="raffles.raffle")),
            ],
            options={
                "ordering": ["sequence_number"],
                "indexes": [
                    models.Index(fields=["raffle", "status"], name="ticket_raffle_status_idx"),
                    models.Index(fields=["ticket_number"], name="ticket_number_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("raffle", "sequence_number"), name="unique_ticket_sequence"),
                    models.UniqueConstraint(fields=("raffle", "ticket_number"), name="unique_ticket_number"),
                ],
            },
        ),
        migrations.AddField(
            model_name="raffle",
            name="winning_ticket",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="+", to="raffles.ticket"),
        ),
        migrations.CreateModel(
            name="DrawLogEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("draw_number", models.PositiveIntegerField()),
                ("result", models.CharField(choices=[("Winner", "Winner"), ("Invalid", "Invalid")], max_length=10)),
                ("reason", models.TextField(blank=True, default="")),
                ("timestamp", models.DateTimeField()),
                ("raffle", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="draw_log", to="raffles.raffle")),
                ("ticket", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="raffles.ticket")),
            ],
            options={
                "ordering": ["draw_number"],
                "constraints": [
                    models.UniqueConstraint(fields=("raffle", "draw_number"), name="unique_draw_number"),
                    models.UniqueConstraint(condition=models.Q(("result", "Winner")), fields=("raffle",), name="single_winner_per_raffle"),
                ],
            },
        ),
    ]
