from raffles.notifiers.interfaces import Notifier
from raffles.notifiers.logging_notifier import LoggingNotifier

__all__ = ["Notifier", "LoggingNotifier"]
