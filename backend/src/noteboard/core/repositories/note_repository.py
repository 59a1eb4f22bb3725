"""Note repository for database operations."""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note

POSITION_FIELDS = frozenset({"pos_x", "pos_y", "order_index", "last_moved_at"})


class NoteRepository:
    """Repository for note database operations.

    CRUD methods commit on their own. The position methods (``update_position``,
    ``shift_orders``, ``delete_row``...) only execute; the positioning service
    owns the surrounding transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Create new note."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.commit()
        await self.session.refresh(note)
        await self.session.refresh(note, ["tag"])
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        stmt = select(Note).where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id_and_user(self, note_id: UUID, user_id: UUID) -> Optional[Note]:
        """Get note by ID if owned by user."""
        stmt = select(Note).where(Note.id == note_id, Note.owner_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_owner(self, owner_id: UUID) -> int:
        stmt = select(func.count(Note.id)).where(Note.owner_id == owner_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def update_note(self, note_id: UUID, user_id: UUID, update_data: dict) -> Optional[Note]:
        """Update title/content/tag of a note owned by user."""
        if POSITION_FIELDS.intersection(update_data):
            raise ValueError("Position fields can only change through the positioning service")

        note = await self.get_by_id_and_user(note_id, user_id)
        if not note:
            return None

        for key, value in update_data.items():
            setattr(note, key, value)

        await self.session.commit()
        await self.session.refresh(note)
        await self.session.refresh(note, ["tag"])
        return note

    async def list_user_notes(
        self,
        user_id: UUID,
        page: int = 1,
        per_page: int = 10,
        tag_id: Optional[UUID] = None,
    ) -> Tuple[List[Note], int]:
        """List user notes in board order with pagination and optional tag filter."""
        offset = (page - 1) * per_page

        conditions = [Note.owner_id == user_id]
        if tag_id is not None:
            conditions.append(Note.tag_id == tag_id)

        count_stmt = select(func.count(Note.id)).where(*conditions)
        total_result = await self.session.execute(count_stmt)
        total_count = total_result.scalar() or 0

        stmt = (
            select(Note)
            .where(*conditions)
            .order_by(Note.order_index, Note.created_at)
            .offset(offset)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total_count

    # --- positioning primitives (no commit) ---

    async def update_position(self, note_id: UUID, fields: Dict[str, Any]) -> int:
        """Write position columns of one note, returns affected row count."""
        unknown = set(fields) - POSITION_FIELDS
        if unknown:
            raise ValueError(f"Not position fields: {sorted(unknown)}")
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(**fields)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def shift_orders(
        self,
        owner_id: UUID,
        lower: int,
        upper: Optional[int],
        delta: int,
        exclude_id: Optional[UUID] = None,
    ) -> int:
        """Add ``delta`` to every sibling order in ``[lower, upper]`` in one statement.

        ``upper`` None means unbounded. Returns affected row count.
        """
        conditions = [Note.owner_id == owner_id, Note.order_index >= lower]
        if upper is not None:
            conditions.append(Note.order_index <= upper)
        if exclude_id is not None:
            conditions.append(Note.id != exclude_id)

        stmt = (
            update(Note)
            .where(*conditions)
            .values(order_index=Note.order_index + delta)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def list_order_slots(self, owner_id: UUID) -> List[Tuple[UUID, int]]:
        """(id, order_index) pairs of an owner's notes in board order."""
        stmt = (
            select(Note.id, Note.order_index)
            .where(Note.owner_id == owner_id)
            .order_by(Note.order_index, Note.created_at)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def delete_row(self, note_id: UUID) -> int:
        stmt = delete(Note).where(Note.id == note_id).execution_options(synchronize_session="fetch")
        result = await self.session.execute(stmt)
        return result.rowcount

    async def owners_with_tag(self, tag_id: UUID) -> List[UUID]:
        stmt = select(Note.owner_id).where(Note.tag_id == tag_id).distinct()
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_tag(self, tag_id: UUID) -> int:
        stmt = delete(Note).where(Note.tag_id == tag_id).execution_options(synchronize_session="fetch")
        result = await self.session.execute(stmt)
        return result.rowcount
