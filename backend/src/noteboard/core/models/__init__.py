"""
Database models.

SQLAlchemy ORM models for the Noteboard schema:
    - User: account with username/password authentication
    - Tag: label/code/color, owned by a user or system-wide
    - Note: content, tag reference and canvas Position
"""

from .base import BaseModel
from .note import Note, Position
from .tag import Tag, TagColor
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "Position",
    "Tag",
    "TagColor",
]
