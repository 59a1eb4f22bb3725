"""WebSocket endpoint for live note positions."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, WebSocket, status

from ..core.logging import get_logger
from ..middleware.auth import get_websocket_user_id
from ..realtime import CommandDispatcher
from .deps import get_dispatcher

router = APIRouter(prefix="/ws", tags=["realtime"])
logger = get_logger("realtime.socket")


@router.websocket("/notes")
async def notes_socket(
    websocket: WebSocket,
    owner_id: Optional[UUID] = Depends(get_websocket_user_id),
    dispatcher: CommandDispatcher = Depends(get_dispatcher),
):
    """Join the board: every applied position change in scope is pushed here.

    Frames are handled one at a time, in arrival order.
    """
    if owner_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    connection = dispatcher.hubs.join(websocket, owner_id)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            frame = message.get("text")
            if frame is None:
                frame = message.get("bytes") or b""
            try:
                await dispatcher.dispatch(owner_id, frame)
            except Exception:
                # a failing frame must not take the socket down with it
                logger.exception("Unhandled error while dispatching frame", extra={"owner_id": str(owner_id)})
    finally:
        dispatcher.hubs.leave(connection)
