"""Event bus for pub/sub messaging patterns."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from .client import MessageQueueClient
from common.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class Event:
    """Event message."""

    event_type: str
    data: Dict[str, Any]
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.utcnow)
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
            "data": self.data,
        }


class EventBus:
    """Publishes domain events to a topic exchange.

    Example:
        bus = EventBus(rabbitmq_url, source="personalization")
        bus.publish("publication.approved", {"productId": 7})
    """

    def __init__(
        self,
        rabbitmq_url: str,
        source: Optional[str] = None,
        exchange: str = "podmarket.events",
        client: Optional[MessageQueueClient] = None,
    ):
        self.client = client or MessageQueueClient(
            rabbitmq_url, connection_name=f"eventbus-{source or 'unknown'}"
        )
        self.source = source
        self.exchange = exchange
        self._declared = False

    def connect(self) -> None:
        self.client.connect()

    def disconnect(self) -> None:
        self.client.disconnect()

    def publish(self, event_type: str, data: Dict[str, Any]) -> Event:
        """Publish event, routed by its type."""
        if not self._declared:
            self.client.declare_exchange(self.exchange)
            self._declared = True

        event = Event(event_type=event_type, data=data, source=self.source)
        self.client.publish(
            exchange=self.exchange,
            routing_key=event_type,
            message=event.to_dict(),
            headers={"event_type": event_type},
        )

        LOGGER.info(
            "Published event",
            event_type=event_type,
            event_id=event.event_id,
            source=self.source,
        )
        return event
