"""Shared OAuth2 / JWT helpers."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from jose import JWTError, jwt

from .config import settings

ADMIN_ROLES = frozenset({"ADMIN", "SUPERADMIN"})


def create_access_token(
    subject: str, expires_minutes: Optional[int] = None, roles: Optional[List[str]] = None
) -> str:
    expire = datetime.utcnow() + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    payload: Dict[str, Any] = {"sub": str(subject), "exp": expire}
    if roles:
        payload["roles"] = roles
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def is_admin(roles: List[str]) -> bool:
    return any(role.upper() in ADMIN_ROLES for role in roles)


__all__ = [
    "ADMIN_ROLES",
    "create_access_token",
    "decode_access_token",
    "is_admin",
]
