"""Message queue client library for marketplace services.

Publishes domain events to RabbitMQ.
"""

from .client import MessageQueueClient
from .events import Event, EventBus

__all__ = [
    "MessageQueueClient",
    "Event",
    "EventBus",
]
