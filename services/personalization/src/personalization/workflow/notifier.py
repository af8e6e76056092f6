"""Delivery of publication workflow events.

Notifiers are fire-and-forget: the workflow catches and logs anything they
raise, so implementations may let transport errors propagate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol

from common.logging import get_logger
from common.messaging import EventBus

from ..realtime.sessions import ADMIN_ROOM, SessionRegistry, vendor_room

LOGGER = get_logger(__name__)


@dataclass
class PublicationNotice:
    type: str
    product_id: int
    old_status: str
    new_status: str
    actor_id: int
    vendor_id: Optional[int] = None
    reason: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.type,
            "productId": self.product_id,
            "oldStatus": self.old_status,
            "newStatus": self.new_status,
            "actorId": self.actor_id,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.vendor_id is not None:
            payload["vendorId"] = self.vendor_id
        if self.reason:
            payload["reason"] = self.reason
        return payload


class Notifier(Protocol):
    def publish(self, event: PublicationNotice) -> None:
        ...


class LoggingNotifier:
    def publish(self, event: PublicationNotice) -> None:
        LOGGER.info("Publication event", **event.to_payload())


class EventBusNotifier:
    """Publishes workflow events to the RabbitMQ events exchange."""

    def __init__(self, bus: EventBus, routing_prefix: str = "publication"):
        self.bus = bus
        self.routing_prefix = routing_prefix

    def publish(self, event: PublicationNotice) -> None:
        self.bus.publish(f"{self.routing_prefix}.{event.type}", event.to_payload())


class SessionRegistryNotifier:
    """Pushes workflow events to connected admins and to the owning vendor."""

    # Admins only care about the review queue.
    ADMIN_EVENTS = frozenset({"submitted", "force_published"})

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def publish(self, event: PublicationNotice) -> None:
        payload = event.to_payload()
        if event.type in self.ADMIN_EVENTS:
            self.registry.broadcast(ADMIN_ROOM, payload)
        if event.vendor_id is not None:
            self.registry.broadcast(vendor_room(event.vendor_id), payload)


class CompositeNotifier:
    """Fans out to several notifiers; one failing does not stop the others."""

    def __init__(self, notifiers: Iterable[Notifier]):
        self.notifiers: List[Notifier] = list(notifiers)

    def publish(self, event: PublicationNotice) -> None:
        for notifier in self.notifiers:
            try:
                notifier.publish(event)
            except Exception as exc:  # noqa: BLE001
                LOGGER.warning(
                    "Notifier failed",
                    notifier=type(notifier).__name__,
                    event_type=event.type,
                    product=event.product_id,
                    error=str(exc),
                )


__all__ = [
    "PublicationNotice",
    "Notifier",
    "LoggingNotifier",
    "EventBusNotifier",
    "SessionRegistryNotifier",
    "CompositeNotifier",
]
