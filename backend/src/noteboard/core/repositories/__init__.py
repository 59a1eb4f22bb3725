"""Repository layer for data access."""

from .note_repository import NoteRepository
from .tag_repository import TagRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "NoteRepository",
    "TagRepository",
]
