from django.apps import AppConfig


class RafflesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "raffles"
