"""JWT token utilities."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import get_settings
from ..core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token carrying a ``jti`` so logout can blacklist it."""
    settings = get_settings()
    to_encode = data.copy()

    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access", "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def _decode(token: str) -> Optional[Dict[str, Any]]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


async def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate an access token, rejecting blacklisted ones."""
    payload = _decode(token)
    if payload is None:
        return None

    jti = payload.get("jti")
    # a Redis outage must not lock everybody out, is_token_blacklisted degrades to False
    if jti and await get_redis_client().is_token_blacklisted(jti):
        return None
    return payload


async def get_user_id_from_token(token: str) -> Optional[UUID]:
    """Extract the owner id (``sub``) from a valid token."""
    payload = await decode_access_token(token)
    if not payload or not payload.get("sub"):
        return None
    try:
        return UUID(payload["sub"])
    except ValueError:
        return None


async def blacklist_token(token: str) -> bool:
    """Blacklist a token for the rest of its lifetime."""
    payload = _decode(token)
    if not payload or not payload.get("jti") or not payload.get("exp"):
        return False

    remaining = int(payload["exp"] - datetime.now(timezone.utc).timestamp())
    if remaining <= 0:
        return True
    return await get_redis_client().add_to_blacklist(payload["jti"], remaining)
