"""
Service interfaces.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..models.note import Note, Position
from ..schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate
from ..schemas.tags import TagCreate, TagResponse, TagUpdate


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """Register new user."""

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return a JWT access token."""

    @abstractmethod
    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""

    @abstractmethod
    async def update_user_profile(self, user_id: UUID, request: UserUpdateRequest) -> UserResponse:
        """Update username and/or full name."""

    @abstractmethod
    async def change_password(self, user_id: UUID, request: PasswordChangeRequest) -> bool:
        """Replace the password after checking the current one."""

    @abstractmethod
    async def logout_user(self, user_id: UUID, access_token: str) -> bool:
        """Invalidate the given access token."""


class IPositionStore(ABC):
    """Persisted note positions and the dense per-owner order."""

    @abstractmethod
    async def get(self, note_id: UUID, owner_id: UUID) -> Position:
        """Current position of an owned note."""

    @abstractmethod
    async def set_coordinates(self, note_id: UUID, owner_id: UUID, x: float, y: float) -> int:
        """Move a note on the canvas, returns the new last-moved timestamp."""

    @abstractmethod
    async def set_order(self, note_id: UUID, owner_id: UUID, target_order: int):
        """Move a note within its owner's list, shifting siblings."""

    @abstractmethod
    async def place_new(self, owner_id: UUID) -> int:
        """Order a newly created note receives."""

    @abstractmethod
    async def add_note(self, note_data: Dict[str, Any]) -> Note:
        """Create a note placed at the end of its owner's list."""

    @abstractmethod
    async def remove_note(self, note_id: UUID, owner_id: UUID) -> int:
        """Delete a note and close the gap it leaves."""

    @abstractmethod
    async def close_gap(self, owner_id: UUID, removed_order: int) -> int:
        """Shift the notes after a removed order up by one."""

    @abstractmethod
    async def compact(self, owner_id: UUID) -> int:
        """Renumber an owner's notes densely."""


class INoteService(ABC):
    """Note CRUD."""

    @abstractmethod
    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note."""

    @abstractmethod
    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        """Get note by ID."""

    @abstractmethod
    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Update title, content or tag."""

    @abstractmethod
    async def delete_note(self, note_id: UUID, user_id: UUID) -> None:
        """Delete note."""

    @abstractmethod
    async def list_user_notes(
        self, user_id: UUID, page: int = 1, per_page: int = 10, tag_code: Optional[str] = None
    ) -> NoteListResponse:
        """List user notes in board order."""


class ITagService(ABC):
    """Tag CRUD."""

    @abstractmethod
    async def create_tag(self, user_id: UUID, request: TagCreate) -> TagResponse:
        """Create a tag owned by the user."""

    @abstractmethod
    async def list_tags(self, user_id: UUID) -> List[TagResponse]:
        """System tags plus the user's own."""

    @abstractmethod
    async def update_tag(self, tag_id: UUID, user_id: UUID, request: TagUpdate) -> TagResponse:
        """Rename or recolor an owned tag."""

    @abstractmethod
    async def delete_tag(self, tag_id: UUID, user_id: UUID) -> int:
        """Delete an owned tag and every note using it."""


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""

    @abstractmethod
    async def get_system_metrics(self) -> Dict[str, Any]:
        """Get system metrics."""
