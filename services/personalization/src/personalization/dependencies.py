"""Personalization service dependencies.

Wires request-scoped components for the routes:
- Bearer token authentication (vendor / admin)
- Placement store and publication workflow over the request session
- Workflow notifier (logging, realtime sessions, RabbitMQ when enabled)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from common.config import settings
from common.db import get_session
from common.logging import get_logger
from common.messaging import EventBus
from common.security import decode_access_token, is_admin

from .placements import PlacementStore
from .realtime.sessions import get_session_registry
from .workflow import (
    CompositeNotifier,
    EventBusNotifier,
    LoggingNotifier,
    Notifier,
    PublicationWorkflow,
    SessionRegistryNotifier,
)

LOGGER = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: int
    roles: List[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return is_admin(self.roles)


def context_from_token(token: Optional[str]) -> Optional[AuthContext]:
    """Build the caller context from a JWT, or None when it is unusable."""
    if not token:
        return None
    claims = decode_access_token(token)
    if not claims:
        return None
    try:
        user_id = int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    roles = claims.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return AuthContext(user_id=user_id, roles=[str(role) for role in roles])


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> AuthContext:
    context = context_from_token(credentials.credentials if credentials else None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


def require_admin(user: AuthContext = Depends(get_current_user)) -> AuthContext:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user


@lru_cache(maxsize=1)
def get_notifier() -> Notifier:
    notifiers: List[Notifier] = [
        LoggingNotifier(),
        SessionRegistryNotifier(get_session_registry()),
    ]
    if settings.events_enabled:
        bus = EventBus(
            settings.rabbitmq_url,
            source=settings.service_name,
            exchange=settings.events_exchange,
        )
        notifiers.append(EventBusNotifier(bus))
        LOGGER.info("Publication events routed to RabbitMQ", exchange=settings.events_exchange)
    return CompositeNotifier(notifiers)


def get_placement_store(session: Session = Depends(get_session)) -> PlacementStore:
    return PlacementStore(session)


def get_workflow(
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
) -> PublicationWorkflow:
    return PublicationWorkflow(session, notifier=notifier)


__all__ = [
    "AuthContext",
    "context_from_token",
    "get_current_user",
    "require_admin",
    "get_notifier",
    "get_placement_store",
    "get_workflow",
]
