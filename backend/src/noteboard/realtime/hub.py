"""Realtime broadcast hubs.

A hub is the live set of sockets that receive each other's position updates.
``HubRegistry`` partitions connections into hubs by the configured broadcast
scope: one shared hub, or one hub per owner.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Set, Union
from uuid import UUID

from starlette.websockets import WebSocket, WebSocketState

from ..core.logging import get_logger
from ..core.schemas.realtime import OutboundMessage

logger = get_logger("realtime.hub")

GLOBAL_SCOPE = "global"


@dataclass(eq=False)
class Connection:
    """One joined socket. Compared by identity so hubs can hold it in a set."""

    websocket: WebSocket
    owner_id: UUID
    scope: str = GLOBAL_SCOPE
    sent: int = field(default=0, compare=False)

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, text: str) -> None:
        await self.websocket.send_text(text)
        self.sent += 1


class BroadcastHub:
    """Fan-out of applied position changes to every open member.

    The originator is a member too and receives its own change back. Closed
    members and failed sends are skipped; members leave when their socket
    closes, or on a failed send when ``prune_on_send_failure`` is set.
    """

    def __init__(self, scope: str = GLOBAL_SCOPE, prune_on_send_failure: bool = False):
        self.scope = scope
        self.prune_on_send_failure = prune_on_send_failure
        self._members: Set[Connection] = set()

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, connection: Connection) -> bool:
        return connection in self._members

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._members))

    def join(self, connection: Connection) -> None:
        self._members.add(connection)
        logger.info(
            "Connection joined hub",
            extra={"scope": self.scope, "owner_id": str(connection.owner_id), "members": len(self)},
        )

    def leave(self, connection: Connection) -> bool:
        if connection not in self._members:
            return False
        self._members.discard(connection)
        logger.info(
            "Connection left hub",
            extra={"scope": self.scope, "owner_id": str(connection.owner_id), "members": len(self)},
        )
        return True

    async def broadcast(self, message: Union[OutboundMessage, str]) -> int:
        """Send ``message`` to every open member; returns how many sends succeeded."""
        text = message if isinstance(message, str) else message.to_json()
        delivered = 0
        failed = []

        # snapshot, a send await may let another socket join or leave
        for connection in list(self._members):
            if not connection.is_open:
                continue
            try:
                await connection.send_text(text)
            except Exception as e:
                logger.warning(
                    "Broadcast send failed",
                    extra={"scope": self.scope, "owner_id": str(connection.owner_id), "error": str(e)},
                )
                failed.append(connection)
                continue
            delivered += 1

        if self.prune_on_send_failure:
            for connection in failed:
                self.leave(connection)

        logger.debug(
            "Broadcast delivered",
            extra={"scope": self.scope, "delivered": delivered, "failed": len(failed)},
        )
        return delivered


class HubRegistry:
    """Hubs keyed by broadcast scope, created on first join and dropped when empty."""

    def __init__(self, broadcast_scope: str = GLOBAL_SCOPE, prune_on_send_failure: bool = False):
        if broadcast_scope not in (GLOBAL_SCOPE, "owner"):
            raise ValueError(f"Unknown broadcast scope: {broadcast_scope}")
        self.broadcast_scope = broadcast_scope
        self.prune_on_send_failure = prune_on_send_failure
        self._hubs: Dict[str, BroadcastHub] = {}

    def __len__(self) -> int:
        return len(self._hubs)

    def scope_for(self, owner_id: UUID) -> str:
        if self.broadcast_scope == GLOBAL_SCOPE:
            return GLOBAL_SCOPE
        return str(owner_id)

    def get(self, owner_id: UUID) -> Optional[BroadcastHub]:
        return self._hubs.get(self.scope_for(owner_id))

    def join(self, websocket: WebSocket, owner_id: UUID) -> Connection:
        scope = self.scope_for(owner_id)
        hub = self._hubs.get(scope)
        if hub is None:
            hub = self._hubs[scope] = BroadcastHub(scope, self.prune_on_send_failure)
        connection = Connection(websocket=websocket, owner_id=owner_id, scope=scope)
        hub.join(connection)
        return connection

    def leave(self, connection: Connection) -> None:
        hub = self._hubs.get(connection.scope)
        if hub is None:
            return
        hub.leave(connection)
        if not len(hub):
            del self._hubs[connection.scope]

    async def broadcast(self, owner_id: UUID, message: Union[OutboundMessage, str]) -> int:
        """Deliver a change made by ``owner_id`` to the hub that owner's changes reach."""
        hub = self.get(owner_id)
        if hub is None:
            return 0
        return await hub.broadcast(message)

    def connection_count(self) -> int:
        return sum(len(hub) for hub in self._hubs.values())
