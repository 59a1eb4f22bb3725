"""Tag repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.tag import Tag


class TagRepository:
    """Repository for tag database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_tag(self, tag_data: dict) -> Tag:
        tag = Tag(**tag_data)
        self.session.add(tag)
        await self.session.commit()
        await self.session.refresh(tag)
        return tag

    async def get_by_id(self, tag_id: UUID) -> Optional[Tag]:
        result = await self.session.execute(select(Tag).where(Tag.id == tag_id))
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str, owner_id: Optional[UUID]) -> Optional[Tag]:
        """Exact lookup in one scope; ``owner_id`` None looks among system tags."""
        owner_clause = Tag.owner_id.is_(None) if owner_id is None else Tag.owner_id == owner_id
        stmt = select(Tag).where(Tag.code == code, owner_clause)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def resolve_code(self, code: str, owner_id: UUID) -> Optional[Tag]:
        """Tag visible to ``owner_id`` for ``code``: own tag first, then system tag."""
        return await self.get_by_code(code, owner_id) or await self.get_by_code(code, None)

    async def list_visible(self, owner_id: UUID) -> List[Tag]:
        """System tags plus the user's own tags."""
        stmt = (
            select(Tag)
            .where(or_(Tag.owner_id.is_(None), Tag.owner_id == owner_id))
            .order_by(Tag.label)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_tag(self, tag: Tag, update_data: dict) -> Tag:
        for key, value in update_data.items():
            setattr(tag, key, value)
        await self.session.commit()
        await self.session.refresh(tag)
        return tag

    async def delete_row(self, tag_id: UUID) -> int:
        """Delete without committing; caller owns the transaction."""
        stmt = delete(Tag).where(Tag.id == tag_id).execution_options(synchronize_session="fetch")
        result = await self.session.execute(stmt)
        return result.rowcount
