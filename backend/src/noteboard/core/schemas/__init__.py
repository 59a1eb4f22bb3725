"""
Pydantic schemas for the HTTP API and the realtime channel.
"""

from .auth import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from .common import ErrorResponse, HealthCheckResponse, PaginationResponse
from .notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    PositionResponse,
    PositionUpdateRequest,
)
from .realtime import (
    CoordinateMove,
    MoveApplied,
    OutboundMessage,
    PositionCommand,
    ReorderApplied,
    ReorderMove,
)
from .tags import TagCreate, TagResponse, TagSummary, TagUpdate

__all__ = [
    # Auth
    "LoginRequest",
    "PasswordChangeRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "UserUpdateRequest",
    # Notes
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListResponse",
    "PositionResponse",
    "PositionUpdateRequest",
    # Tags
    "TagCreate",
    "TagUpdate",
    "TagSummary",
    "TagResponse",
    # Realtime
    "CoordinateMove",
    "ReorderMove",
    "PositionCommand",
    "ReorderApplied",
    "MoveApplied",
    "OutboundMessage",
    # Common
    "PaginationResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
