"""
Note schemas.

API contracts for note CRUD and for the HTTP position endpoint.
"""

import math
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import PaginationResponse
from .tags import TagSummary


class NoteCreate(BaseModel):
    """Note creation request; the tag is referenced by code."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(min_length=1, description="Note content")
    tag: str = Field(min_length=1, max_length=60, description="Tag code, e.g. 'work-items'")

    @field_validator("title", "content", "tag")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Sprint retro",
                "content": "What went well, what did not",
                "tag": "work",
            }
        }
    )


class NoteUpdate(BaseModel):
    """Note update request. Position is not editable here."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    tag: Optional[str] = Field(default=None, min_length=1, max_length=60)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def at_least_one_field(self):
        if self.title is None and self.content is None and self.tag is None:
            raise ValueError("At least one field (title, content or tag) is required")
        return self


class PositionResponse(BaseModel):
    x: float
    y: float
    order: int
    last_moved_at: int = Field(description="Unix seconds of the last coordinate move")


class NoteResponse(BaseModel):
    """Note response schema."""

    id: uuid.UUID
    title: str
    content: str
    tag: TagSummary
    owner_id: uuid.UUID
    position: PositionResponse
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_note(cls, note) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            tag=TagSummary.model_validate(note.tag),
            owner_id=note.owner_id,
            position=PositionResponse(
                x=note.pos_x,
                y=note.pos_y,
                order=note.order_index,
                last_moved_at=note.last_moved_at,
            ),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteListResponse(PaginationResponse[NoteResponse]):
    """Paginated note list, in board order."""


class PositionUpdateRequest(BaseModel):
    """Body of ``PUT /notes/{id}/position``: either coordinates or an order."""

    x: Optional[float] = None
    y: Optional[float] = None
    order: Optional[int] = Field(default=None, strict=True)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def one_kind_of_move(self):
        has_coords = self.x is not None or self.y is not None
        if self.order is not None and has_coords:
            raise ValueError("Send either x/y or order, not both")
        if self.order is None:
            if self.x is None or self.y is None:
                raise ValueError("Both x and y are required for a move")
            if not (math.isfinite(self.x) and math.isfinite(self.y)):
                raise ValueError("Coordinates must be finite numbers")
        return self

    @property
    def is_reorder(self) -> bool:
        return self.order is not None
