from django.contrib import admin

from raffles.models import DrawLogEntry, Organizer, PlatformSettings, Raffle, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    fields = ["sequence_number", "ticket_number", "status", "payment_recipient", "player_venmo"]
    readonly_fields = ["sequence_number", "ticket_number", "payment_recipient"]


class DrawLogEntryInline(admin.TabularInline):
    model = DrawLogEntry
    extra = 0
    readonly_fields = ["draw_number", "ticket", "result", "reason", "timestamp"]
    can_delete = False


@admin.register(Organizer)
class OrganizerAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "role", "status"]
    list_filter = ["role", "status"]
    search_fields = ["name", "email"]


@admin.register(Raffle)
class RaffleAdmin(admin.ModelAdmin):
    list_display = ["name", "organizer", "status", "tickets_sold", "max_tickets", "created_at"]
    list_filter = ["status"]
    search_fields = ["name", "beneficiary_name"]
    inlines = [TicketInline, DrawLogEntryInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["ticket_number", "raffle", "status", "payment_recipient"]
    list_filter = ["status", "payment_recipient"]
    search_fields = ["ticket_number", "player_email"]


@admin.register(PlatformSettings)
class PlatformSettingsAdmin(admin.ModelAdmin):
    list_display = ["max_redraws", "owner_venmo", "auto_verify_tickets"]
