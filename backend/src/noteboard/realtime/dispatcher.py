"""Command dispatcher: decode a frame, apply it through the position store, broadcast."""

from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..core.exceptions import NoteboardError, StorageError
from ..core.logging import get_logger
from ..core.positioning import OwnerLocks
from ..core.schemas.realtime import (
    CoordinateMove,
    MoveApplied,
    OutboundMessage,
    PositionCommand,
    ReorderApplied,
    ReorderMove,
)
from ..core.services.position_store import PositionStore
from .hub import HubRegistry
from .protocol import decode_frame

logger = get_logger("realtime.dispatcher")
frame_logger = get_logger("realtime.frames")


@dataclass(frozen=True)
class DispatchOutcome:
    """What became of one inbound frame."""

    applied: bool
    message: Optional[OutboundMessage] = None
    error: Optional[NoteboardError] = None
    delivered: int = 0


class CommandDispatcher:
    """Routes position commands to the store and fans the result out.

    Every command runs in its own database session. ``dispatch`` never raises
    for bad input or a rejected command; it logs and drops the frame.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        hubs: HubRegistry,
        locks: Optional[OwnerLocks] = None,
        max_frame_bytes: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.hubs = hubs
        self.locks = locks
        self.max_frame_bytes = max_frame_bytes

    async def apply(self, owner_id: UUID, command: PositionCommand) -> OutboundMessage:
        """Persist one command and describe the applied change."""
        try:
            async with self.session_factory() as session:
                store = PositionStore(session, locks=self.locks)
                if isinstance(command, ReorderMove):
                    result = await store.set_order(command.note_id, owner_id, command.order)
                    payload: Union[ReorderApplied, MoveApplied] = ReorderApplied(
                        note_id=result.note_id, order=result.order, old_order=result.old_order
                    )
                elif isinstance(command, CoordinateMove):
                    moved_at = await store.set_coordinates(command.note_id, owner_id, command.x, command.y)
                    payload = MoveApplied(
                        note_id=command.note_id, x=command.x, y=command.y, last_moved_at=moved_at
                    )
                else:
                    raise TypeError(f"Unsupported command: {type(command).__name__}")
        except SQLAlchemyError as e:
            # connection checkout or session close, outside the store's own handling
            raise StorageError("Database unavailable", cause=e) from e
        return OutboundMessage(payload=payload)

    async def apply_and_broadcast(self, owner_id: UUID, command: PositionCommand) -> OutboundMessage:
        """Apply a command and broadcast it; errors propagate to the caller."""
        message = await self.apply(owner_id, command)
        await self.hubs.broadcast(owner_id, message)
        return message

    async def dispatch(self, owner_id: UUID, raw: Union[str, bytes]) -> DispatchOutcome:
        """Handle one inbound frame from ``owner_id``'s socket."""
        frame_logger.debug("Frame received", extra={"owner_id": str(owner_id), "frame": raw})
        try:
            command = decode_frame(raw, self.max_frame_bytes)
            message = await self.apply(owner_id, command)
        except NoteboardError as e:
            logger.warning(
                "Realtime frame dropped",
                extra={
                    "owner_id": str(owner_id),
                    "error_code": e.code,
                    "error_message": e.message,
                },
            )
            return DispatchOutcome(applied=False, error=e)

        delivered = await self.hubs.broadcast(owner_id, message)
        logger.info(
            "Position change applied",
            extra={
                "owner_id": str(owner_id),
                "note_id": str(message.payload.note_id),
                "kind": "reorder" if isinstance(message.payload, ReorderApplied) else "move",
                "delivered": delivered,
            },
        )
        return DispatchOutcome(applied=True, message=message, delivered=delivered)
