"""
User model for authentication.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .note import Note
    from .tag import Tag


class User(BaseModel):
    """User account with username/password auth."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    notes: Mapped[List["Note"]] = relationship(
        "Note", back_populates="owner", passive_deletes=True, lazy="raise"
    )
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", back_populates="owner", passive_deletes=True, lazy="raise"
    )

    __table_args__ = (
        CheckConstraint("length(username) <= 50", name="ck_users_username_len"),
        Index("idx_users_username", "username"),
    )

    def __repr__(self) -> str:
        return f"<User(username='{self.username}')>"

    @property
    def display_name(self) -> str:
        return self.full_name if self.full_name else self.username

    def can_login(self) -> bool:
        return self.is_active
