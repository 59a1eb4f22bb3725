"""Authentication dependencies."""

from .auth import JWTBearer, get_bearer_token, get_current_user_id, get_websocket_user_id

__all__ = ["get_current_user_id", "get_bearer_token", "get_websocket_user_id", "JWTBearer"]
