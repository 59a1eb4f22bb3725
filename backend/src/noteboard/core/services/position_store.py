"""Position store: persisted note positions and the dense per-owner order."""

import logging
import math
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ForbiddenError, NotFoundError, StorageError, ValidationError
from ..models.note import Note, Position, unix_now
from ..positioning import OwnerLocks, compact_orders, get_owner_locks, plan_reorder
from ..repositories.note_repository import NoteRepository
from ..repositories.tag_repository import TagRepository
from .interfaces import IPositionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReorderResult:
    note_id: UUID
    order: int
    old_order: int
    shifted: int = 0

    @property
    def changed(self) -> bool:
        return self.order != self.old_order


def _require_coordinate(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number", field=field)
    if not math.isfinite(value):
        raise ValidationError(f"{field} must be finite", field=field)
    return float(value)


class PositionStore(IPositionStore):
    """Reads and writes note positions for one database session.

    Order mutations for an owner run under that owner's lock and commit the
    moved note together with the sibling shift. Coordinate moves take no lock.
    """

    def __init__(
        self,
        session: AsyncSession,
        locks: Optional[OwnerLocks] = None,
        clock: Callable[[], int] = unix_now,
    ):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.locks = locks if locks is not None else get_owner_locks()
        self.clock = clock

    @asynccontextmanager
    async def _transaction(self):
        try:
            yield
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Position write rolled back", exc_info=e)
            raise StorageError("Failed to persist position change", cause=e) from e

    @asynccontextmanager
    async def _storage(self, action: str):
        """Turn a failed read into ``StorageError``; writes go through ``_transaction``."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Position read failed", extra={"action": action}, exc_info=e)
            raise StorageError(f"Failed to {action}", cause=e) from e

    async def _owned_note(self, note_id: UUID, owner_id: UUID) -> Note:
        async with self._storage("load note"):
            note = await self.note_repo.get_by_id(note_id)
        if note is None:
            raise NotFoundError("Note", note_id)
        if note.owner_id != owner_id:
            raise ForbiddenError(f"Note {note_id} belongs to another user")
        return note

    async def get(self, note_id: UUID, owner_id: UUID) -> Position:
        note = await self._owned_note(note_id, owner_id)
        return note.position

    async def set_coordinates(self, note_id: UUID, owner_id: UUID, x: float, y: float) -> int:
        x = _require_coordinate(x, "x")
        y = _require_coordinate(y, "y")
        await self._owned_note(note_id, owner_id)

        moved_at = self.clock()
        async with self._transaction():
            await self.note_repo.update_position(
                note_id, {"pos_x": x, "pos_y": y, "last_moved_at": moved_at}
            )
        logger.debug("Note moved", extra={"note_id": str(note_id), "x": x, "y": y})
        return moved_at

    async def set_order(self, note_id: UUID, owner_id: UUID, target_order: int) -> ReorderResult:
        """Move a note to ``target_order``; siblings in between shift by one.

        Order-only changes leave ``last_moved_at`` alone.
        """
        async with self.locks.hold(owner_id):
            note = await self._owned_note(note_id, owner_id)
            old_order = note.order_index
            async with self._storage("count notes"):
                count = await self.note_repo.count_by_owner(owner_id)
            plan = plan_reorder(old_order, target_order, count)

            if plan.is_noop:
                return ReorderResult(note_id, old_order, old_order)

            async with self._transaction():
                shifted = await self.note_repo.shift_orders(
                    owner_id,
                    plan.shift.lower,
                    plan.shift.upper,
                    plan.shift.delta,
                    exclude_id=note_id,
                )
                await self.note_repo.update_position(note_id, {"order_index": plan.new_order})

        logger.info(
            "Note reordered",
            extra={
                "note_id": str(note_id),
                "old_order": old_order,
                "order": plan.new_order,
                "shifted": shifted,
            },
        )
        return ReorderResult(note_id, plan.new_order, old_order, shifted)

    async def place_new(self, owner_id: UUID) -> int:
        """Order a new note takes: one past the owner's last note."""
        async with self._storage("count notes"):
            return await self.note_repo.count_by_owner(owner_id)

    async def add_note(self, note_data: Dict[str, Any]) -> Note:
        """Insert a note at the end of its owner's list."""
        owner_id = note_data["owner_id"]
        async with self.locks.hold(owner_id):
            order = await self.place_new(owner_id)
            placed = {
                **note_data,
                "pos_x": 0.0,
                "pos_y": 0.0,
                "order_index": order,
                "last_moved_at": self.clock(),
            }
            async with self._storage("create note"):
                return await self.note_repo.create_note(placed)

    async def remove_note(self, note_id: UUID, owner_id: UUID) -> int:
        """Delete a note and pull every later sibling up one slot.

        Returns the order the note held.
        """
        async with self.locks.hold(owner_id):
            note = await self._owned_note(note_id, owner_id)
            removed_order = note.order_index
            async with self._transaction():
                await self.note_repo.delete_row(note_id)
                await self._close_gap_unlocked(owner_id, removed_order)
        logger.info("Note removed", extra={"note_id": str(note_id), "order": removed_order})
        return removed_order

    async def _close_gap_unlocked(self, owner_id: UUID, removed_order: int) -> int:
        return await self.note_repo.shift_orders(owner_id, removed_order + 1, None, -1)

    async def close_gap(self, owner_id: UUID, removed_order: int) -> int:
        """Pull every note after ``removed_order`` up one slot."""
        async with self.locks.hold(owner_id):
            async with self._transaction():
                return await self._close_gap_unlocked(owner_id, removed_order)

    async def _compact_unlocked(self, owner_id: UUID) -> int:
        slots = await self.note_repo.list_order_slots(owner_id)
        changes = compact_orders(slots)
        for note_id, order in changes:
            await self.note_repo.update_position(note_id, {"order_index": order})
        return len(changes)

    async def compact(self, owner_id: UUID) -> int:
        """Renumber an owner's notes to ``0..N-1``, keeping their relative order."""
        async with self.locks.hold(owner_id):
            async with self._transaction():
                changed = await self._compact_unlocked(owner_id)
        if changed:
            logger.warning("Compacted order gaps", extra={"owner_id": str(owner_id), "changed": changed})
        return changed

    async def _owners_with_tag(self, tag_id: UUID) -> List[UUID]:
        async with self._storage("list tag owners"):
            return sorted(await self.note_repo.owners_with_tag(tag_id), key=str)

    async def delete_tag_cascade(self, tag_id: UUID) -> List[UUID]:
        """Delete a tag with its notes, then re-densify every affected owner.

        Returns the affected owner ids.
        """
        tag_repo = TagRepository(self.session)
        locked = await self._owners_with_tag(tag_id)

        while True:
            # fixed acquisition order so two cascades never wait on each other
            async with AsyncExitStack() as stack:
                for owner_id in locked:
                    await stack.enter_async_context(self.locks.hold(owner_id))

                # an owner may have tagged a note before we held its lock
                owners = await self._owners_with_tag(tag_id)
                if not set(owners) <= set(locked):
                    locked = sorted(set(locked) | set(owners), key=str)
                    continue

                async with self._transaction():
                    deleted = await self.note_repo.delete_by_tag(tag_id)
                    await tag_repo.delete_row(tag_id)
                    for owner_id in owners:
                        await self._compact_unlocked(owner_id)
                break

        logger.info(
            "Tag deleted with its notes",
            extra={"tag_id": str(tag_id), "notes_deleted": deleted, "owners": len(owners)},
        )
        return owners
