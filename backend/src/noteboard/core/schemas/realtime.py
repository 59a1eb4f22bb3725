"""
Realtime message schemas.

Inbound ``UPDATE_NOTE_POSITION`` payloads decode into exactly one of
``CoordinateMove`` or ``ReorderMove``; anything else is rejected at the
boundary. Outbound payloads mirror the applied change.
"""

import uuid
from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

UPDATE_NOTE_POSITION = "UPDATE_NOTE_POSITION"

Coordinate = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    note_id: uuid.UUID = Field(alias="noteId")


class CoordinateMove(_Payload):
    """Drag on the canvas: ``{noteId, x, y}``."""

    x: Coordinate
    y: Coordinate


class ReorderMove(_Payload):
    """Move within the owner's list: ``{noteId, order}``."""

    order: int = Field(strict=True)


PositionCommand = Union[CoordinateMove, ReorderMove]

position_command_adapter: TypeAdapter[PositionCommand] = TypeAdapter(PositionCommand)


class InboundEnvelope(BaseModel):
    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class ReorderApplied(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    note_id: uuid.UUID = Field(serialization_alias="noteId")
    order: int
    old_order: int = Field(serialization_alias="oldOrder")


class MoveApplied(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    note_id: uuid.UUID = Field(serialization_alias="noteId")
    x: float
    y: float
    last_moved_at: int = Field(serialization_alias="lastMovedAt")


class OutboundMessage(BaseModel):
    type: Literal["UPDATE_NOTE_POSITION"] = UPDATE_NOTE_POSITION
    payload: Union[ReorderApplied, MoveApplied]

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
