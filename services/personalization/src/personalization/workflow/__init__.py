"""Publication workflow and its event delivery."""

from .notifier import (
    CompositeNotifier,
    EventBusNotifier,
    LoggingNotifier,
    Notifier,
    PublicationNotice,
    SessionRegistryNotifier,
)
from .publication import PublicationWorkflow

__all__ = [
    "CompositeNotifier",
    "EventBusNotifier",
    "LoggingNotifier",
    "Notifier",
    "PublicationNotice",
    "PublicationWorkflow",
    "SessionRegistryNotifier",
]
