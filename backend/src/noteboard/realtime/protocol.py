"""Decoding of inbound realtime frames."""

from typing import Optional, Union

import pydantic

from ..core.exceptions import ProtocolError, ValidationError
from ..core.schemas.realtime import (
    UPDATE_NOTE_POSITION,
    InboundEnvelope,
    PositionCommand,
    position_command_adapter,
)


def _first_error(exc: pydantic.ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def decode_frame(raw: Union[str, bytes], max_bytes: Optional[int] = None) -> PositionCommand:
    """Turn a ``{type, payload}`` text frame into a typed position command.

    Raises ``ProtocolError`` for oversized or malformed frames and unknown
    types, ``ValidationError`` when the payload is neither ``{noteId, x, y}``
    nor ``{noteId, order}``.
    """
    size = len(raw.encode("utf-8") if isinstance(raw, str) else raw)
    if max_bytes is not None and size > max_bytes:
        raise ProtocolError(f"Frame of {size} bytes exceeds {max_bytes}", {"size": size})

    try:
        envelope = InboundEnvelope.model_validate_json(raw)
    except pydantic.ValidationError as e:
        raise ProtocolError(f"Malformed frame: {_first_error(e)}") from e

    if envelope.type != UPDATE_NOTE_POSITION:
        raise ProtocolError(f"Unknown message type: {envelope.type}", {"type": envelope.type})

    try:
        return position_command_adapter.validate_python(envelope.payload)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Payload must be {{noteId, x, y}} or {{noteId, order}} ({_first_error(e)})",
            field="payload",
        ) from e
