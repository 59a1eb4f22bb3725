"""Tag schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.tag import TagColor


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50, description="Display name; label and code derive from it")
    color: TagColor = Field(default=TagColor.BLUE)


class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    color: Optional[TagColor] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def at_least_one_field(self):
        if self.name is None and self.color is None:
            raise ValueError("At least one field (name or color) is required")
        return self


class TagSummary(BaseModel):
    """Tag as embedded in note responses."""

    id: uuid.UUID
    code: str
    label: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class TagResponse(TagSummary):
    owner_id: Optional[uuid.UUID] = Field(description="NULL for system tags")
    is_system: bool
    created_at: datetime
    updated_at: datetime
