# Tags used to categorize notes
import re
import uuid
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note
    from .user import User


class TagColor(str, Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"


_WORD_RE = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]|\b|\d)|[A-Z]?[a-z]+|[A-Z]+|\d+")


class Tag(BaseModel):
    """Tag for categorizing notes. ``owner_id`` NULL marks a system tag."""

    __tablename__ = "tags"

    label: Mapped[str] = mapped_column(String(50), nullable=False)
    code: Mapped[str] = mapped_column(String(60), nullable=False)
    color: Mapped[str] = mapped_column(String(10), default=TagColor.BLUE.value, nullable=False)

    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )

    owner: Mapped[Optional["User"]] = relationship("User", back_populates="tags")
    notes: Mapped[List["Note"]] = relationship(
        "Note", back_populates="tag", passive_deletes=True, lazy="raise"
    )

    __table_args__ = (
        UniqueConstraint("owner_id", "code", name="uq_tags_owner_code"),
        CheckConstraint("code = lower(code)", name="ck_tags_code_lowercase"),
        CheckConstraint("length(label) <= 50", name="ck_tags_label_len"),
        Index("idx_tags_owner_id", "owner_id"),
        Index("idx_tags_code", "code"),
    )

    def __repr__(self) -> str:
        return f"<Tag(code='{self.code}', owner_id={self.owner_id})>"

    @property
    def is_system(self) -> bool:
        return self.owner_id is None

    @staticmethod
    def make_label(value: str) -> str:
        """'my TAG' -> 'My tag'."""
        clean = value.strip()
        if not clean:
            raise ValueError("Tag name cannot be empty")
        return clean[:1].upper() + clean[1:].lower()

    @staticmethod
    def make_code(value: str) -> str:
        """'Work Items', 'workItems', 'work_items' -> 'work-items'."""
        words = _WORD_RE.findall(value)
        if not words:
            raise ValueError("Tag name must contain letters or digits")
        return "-".join(word.lower() for word in words)
