"""Note service implementation."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError, ValidationError
from ..models.tag import Tag
from ..repositories.note_repository import NoteRepository
from ..repositories.tag_repository import TagRepository
from ..schemas.notes import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate
from .interfaces import INoteService
from .position_store import PositionStore

logger = logging.getLogger(__name__)


class NoteService(INoteService):
    """Note CRUD. Placement and removal go through the position store."""

    def __init__(self, session: AsyncSession, position_store: Optional[PositionStore] = None):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.tag_repo = TagRepository(session)
        self.positions = position_store or PositionStore(session)

    async def _resolve_tag(self, code: str, user_id: UUID) -> Tag:
        try:
            normalized = Tag.make_code(code)
        except ValueError as e:
            raise ValidationError(str(e), field="tag") from e
        tag = await self.tag_repo.resolve_code(normalized, user_id)
        if not tag:
            raise NotFoundError("Tag", normalized)
        return tag

    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        tag = await self._resolve_tag(request.tag, user_id)
        note = await self.positions.add_note(
            {
                "title": request.title,
                "content": request.content,
                "tag_id": tag.id,
                "owner_id": user_id,
            }
        )
        logger.info("Note created", extra={"note_id": str(note.id), "order": note.order_index})
        return NoteResponse.from_note(note)

    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        # 404 for notes of other users too, existence is not leaked
        note = await self.note_repo.get_by_id_and_user(note_id, user_id)
        if not note:
            raise NotFoundError("Note", note_id)
        return NoteResponse.from_note(note)

    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        update_data = {}
        if request.title is not None:
            update_data["title"] = request.title
        if request.content is not None:
            update_data["content"] = request.content
        if request.tag is not None:
            update_data["tag_id"] = (await self._resolve_tag(request.tag, user_id)).id

        note = await self.note_repo.update_note(note_id, user_id, update_data)
        if not note:
            raise NotFoundError("Note", note_id)
        return NoteResponse.from_note(note)

    async def delete_note(self, note_id: UUID, user_id: UUID) -> None:
        await self.positions.remove_note(note_id, user_id)

    async def list_user_notes(
        self,
        user_id: UUID,
        page: int = 1,
        per_page: int = 10,
        tag_code: Optional[str] = None,
    ) -> NoteListResponse:
        if page < 1:
            page = 1
        if per_page < 1 or per_page > 100:
            per_page = 10

        tag_id = None
        if tag_code:
            tag_id = (await self._resolve_tag(tag_code, user_id)).id

        notes, total = await self.note_repo.list_user_notes(user_id, page, per_page, tag_id)
        return NoteListResponse.create(
            items=[NoteResponse.from_note(note) for note in notes],
            total=total,
            page=page,
            per_page=per_page,
        )
