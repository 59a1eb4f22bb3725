"""
Service layer: interfaces and implementations.
"""

from .interfaces import IAuthService, IHealthService, INoteService, IPositionStore, ITagService
from .auth_service import AuthService
from .health_service import HealthService
from .note_service import NoteService
from .position_store import PositionStore, ReorderResult
from .tag_service import TagService

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "ITagService",
    "IPositionStore",
    "IHealthService",
    # Implementations
    "AuthService",
    "NoteService",
    "TagService",
    "PositionStore",
    "ReorderResult",
    "HealthService",
]
