"""Notes API endpoints."""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    PositionUpdateRequest,
)
from ..core.schemas.realtime import CoordinateMove, ReorderMove
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id
from ..realtime import CommandDispatcher
from .deps import get_dispatcher

router = APIRouter(prefix="/notes", tags=["notes"])
settings = get_settings()


@router.post("/", response_model=NoteResponse, status_code=201)
async def create_note(
    request: NoteCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a note at the end of the caller's list."""
    note_service = NoteService(session)
    return await note_service.create_note(current_user_id, request)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    tag: Optional[str] = Query(None, description="Tag code to filter by"),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List the caller's notes in board order."""
    note_service = NoteService(session)
    return await note_service.list_user_notes(
        user_id=current_user_id, page=page, per_page=per_page, tag_code=tag
    )


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    note_service = NoteService(session)
    return await note_service.get_note(note_id, current_user_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update title, content or tag. Positions change through ``/position``."""
    note_service = NoteService(session)
    return await note_service.update_note(note_id, current_user_id, request)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note; the notes after it move up one slot."""
    note_service = NoteService(session)
    await note_service.delete_note(note_id, current_user_id)


@router.put("/{note_id}/position", response_model=Dict[str, Any])
async def update_note_position(
    note_id: UUID,
    request: PositionUpdateRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    dispatcher: CommandDispatcher = Depends(get_dispatcher),
):
    """Move or reorder a note and broadcast the change to connected boards."""
    if request.is_reorder:
        command = ReorderMove(note_id=note_id, order=request.order)
    else:
        command = CoordinateMove(note_id=note_id, x=float(request.x), y=float(request.y))
    message = await dispatcher.apply_and_broadcast(current_user_id, command)
    return message.model_dump(mode="json", by_alias=True)
