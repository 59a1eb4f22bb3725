"""Tag service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..models.tag import Tag
from ..repositories.tag_repository import TagRepository
from ..schemas.tags import TagCreate, TagResponse, TagUpdate
from .interfaces import ITagService
from .position_store import PositionStore

logger = logging.getLogger(__name__)


def _to_response(tag: Tag) -> TagResponse:
    return TagResponse(
        id=tag.id,
        code=tag.code,
        label=tag.label,
        color=tag.color,
        owner_id=tag.owner_id,
        is_system=tag.is_system,
        created_at=tag.created_at,
        updated_at=tag.updated_at,
    )


def _derive_names(name: str) -> tuple[str, str]:
    try:
        return Tag.make_label(name), Tag.make_code(name)
    except ValueError as e:
        raise ValidationError(str(e), field="name") from e


class TagService(ITagService):
    """Tag CRUD.

    Users manage their own tags; system tags (no owner) are read-only.
    """

    def __init__(self, session: AsyncSession, position_store: Optional[PositionStore] = None):
        self.session = session
        self.tag_repo = TagRepository(session)
        self.positions = position_store or PositionStore(session)

    async def _owned_tag(self, tag_id: UUID, user_id: UUID) -> Tag:
        tag = await self.tag_repo.get_by_id(tag_id)
        if tag is None or (tag.owner_id is not None and tag.owner_id != user_id):
            raise NotFoundError("Tag", tag_id)
        if tag.is_system:
            raise ForbiddenError("System tags cannot be modified")
        return tag

    async def _ensure_code_free(self, code: str, user_id: UUID, current: Optional[Tag] = None):
        clash = await self.tag_repo.get_by_code(code, user_id) or await self.tag_repo.get_by_code(code, None)
        if clash is not None and clash is not current:
            raise ConflictError(f"Tag '{code}' already exists", {"code": code})

    async def create_tag(self, user_id: UUID, request: TagCreate) -> TagResponse:
        label, code = _derive_names(request.name)
        await self._ensure_code_free(code, user_id)
        try:
            tag = await self.tag_repo.create_tag(
                {"label": label, "code": code, "color": request.color.value, "owner_id": user_id}
            )
        except IntegrityError as e:
            # lost a race against a concurrent create with the same code
            await self.session.rollback()
            raise ConflictError(f"Tag '{code}' already exists", {"code": code}) from e
        logger.info("Tag created", extra={"tag_id": str(tag.id), "code": code})
        return _to_response(tag)

    async def list_tags(self, user_id: UUID) -> List[TagResponse]:
        return [_to_response(tag) for tag in await self.tag_repo.list_visible(user_id)]

    async def update_tag(self, tag_id: UUID, user_id: UUID, request: TagUpdate) -> TagResponse:
        tag = await self._owned_tag(tag_id, user_id)
        update_data = {}
        if request.name is not None:
            label, code = _derive_names(request.name)
            if code != tag.code:
                await self._ensure_code_free(code, user_id, current=tag)
            update_data.update(label=label, code=code)
        if request.color is not None:
            update_data["color"] = request.color.value

        tag = await self.tag_repo.update_tag(tag, update_data)
        return _to_response(tag)

    async def delete_tag(self, tag_id: UUID, user_id: UUID) -> int:
        """Delete the tag and its notes; returns how many owners were re-densified."""
        await self._owned_tag(tag_id, user_id)
        owners = await self.positions.delete_tag_cascade(tag_id)
        return len(owners)
