# Note model: content, tag and canvas position
import time
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, CheckConstraint, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .tag import Tag
    from .user import User


def unix_now() -> int:
    """Current time as whole unix seconds."""
    return int(time.time())


@dataclass(frozen=True)
class Position:
    """Where a note sits on the canvas and in its owner's list."""

    x: float
    y: float
    order: int
    last_moved_at: int


class Note(BaseModel):
    """A user's note pinned to the shared canvas."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    tag_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("tags.id", ondelete="CASCADE"), nullable=False
    )

    # position columns; written only through the positioning service
    pos_x: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    pos_y: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_moved_at: Mapped[int] = mapped_column(BigInteger, default=unix_now, nullable=False)

    owner: Mapped["User"] = relationship("User", back_populates="notes")
    tag: Mapped["Tag"] = relationship("Tag", back_populates="notes", lazy="selectin")

    # No unique (owner_id, order_index): the sibling shift passes through
    # duplicate values mid-statement on databases that check per row.
    __table_args__ = (
        CheckConstraint("order_index >= 0", name="ck_notes_order_non_negative"),
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
        Index("idx_notes_owner_order", "owner_id", "order_index"),
        Index("idx_notes_tag_id", "tag_id"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', order={self.order_index}, owner_id={self.owner_id})>"

    @property
    def position(self) -> Position:
        return Position(
            x=self.pos_x,
            y=self.pos_y,
            order=self.order_index,
            last_moved_at=self.last_moved_at,
        )

    @property
    def preview(self) -> str:
        """Get content preview."""
        if len(self.content) <= 150:
            return self.content
        return self.content[:147] + "..."

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.owner_id == user_id
