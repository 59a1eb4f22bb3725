"""Authentication dependencies for HTTP routes and WebSockets."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Query, Request, WebSocket, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..security import get_user_id_from_token


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication, resolves to the caller's user id."""

    def __init__(self, auto_error: bool = True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request: Request) -> UUID:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Invalid authorization code"
            )
        if credentials.scheme != "Bearer":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Invalid authentication scheme"
            )

        user_id = await get_user_id_from_token(credentials.credentials)
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token or expired token"
            )
        return user_id


async def get_current_user_id(user_id: UUID = Depends(JWTBearer())) -> UUID:
    """Get current authenticated user ID."""
    return user_id


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials = Depends(HTTPBearer()),
) -> str:
    return credentials.credentials


async def get_websocket_user_id(
    websocket: WebSocket, token: Optional[str] = Query(default=None)
) -> Optional[UUID]:
    """Resolve the socket's owner from the ``?token=`` query parameter.

    Returns None instead of raising; the endpoint closes the socket itself.
    """
    if not token:
        return None
    return await get_user_id_from_token(token)
