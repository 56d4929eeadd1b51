"""Wiring of stores, notifiers and services for the HTTP handlers."""

import functools
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings

from raffles.notifiers import LoggingNotifier
from raffles.services import (
    RaffleLocks,
    RaffleOrchestrator,
    RaffleService,
    SecureRandomSource,
    SeededRandomSource,
)
from raffles.stores.django_store import DjangoRaffleStore


def platform_option(name: str, default=None):
    return getattr(settings, "FIFTYFIFTY", {}).get(name, default)


@functools.cache
def get_store() -> DjangoRaffleStore:
    return DjangoRaffleStore(lock_timeout=platform_option("OPERATION_TIMEOUT"))


@functools.cache
def get_locks() -> RaffleLocks:
    return RaffleLocks()


@functools.cache
def get_notification_pool() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify")


@functools.cache
def get_orchestrator() -> RaffleOrchestrator:
    seed = platform_option("RANDOM_SEED")
    return RaffleOrchestrator(
        store=get_store(),
        notifier=LoggingNotifier(),
        random_source=SecureRandomSource() if seed is None else SeededRandomSource(seed),
        locks=get_locks(),
        timeout=platform_option("OPERATION_TIMEOUT"),
        dispatcher=get_notification_pool(),
        allow_insecure_random=platform_option("ALLOW_INSECURE_RANDOM", False),
    )


@functools.cache
def get_raffle_service() -> RaffleService:
    return RaffleService(
        store=get_store(),
        notifier=LoggingNotifier(),
        locks=get_locks(),
        timeout=platform_option("OPERATION_TIMEOUT"),
    )
