"""Unit tests for the broadcast hub and hub registry."""

import json
import uuid

import pytest
from starlette.websockets import WebSocketState

from src.noteboard.core.schemas.realtime import OutboundMessage, ReorderApplied
from src.noteboard.realtime.hub import BroadcastHub, Connection, HubRegistry


class FakeSocket:
    def __init__(self, open_=True, fail=False):
        state = WebSocketState.CONNECTED if open_ else WebSocketState.DISCONNECTED
        self.client_state = state
        self.application_state = state
        self.fail = fail
        self.sent = []

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("socket gone")
        self.sent.append(text)


def _message(order=2, old_order=0):
    note_id = uuid.uuid4()
    return OutboundMessage(payload=ReorderApplied(note_id=note_id, order=order, old_order=old_order))


def _join(hub, socket, owner_id=None):
    connection = Connection(websocket=socket, owner_id=owner_id or uuid.uuid4())
    hub.join(connection)
    return connection


@pytest.mark.asyncio
async def test_broadcast_reaches_every_open_member_and_skips_closed():
    hub = BroadcastHub()
    open_sockets = [FakeSocket() for _ in range(3)]
    closed = FakeSocket(open_=False)
    for socket in open_sockets + [closed]:
        _join(hub, socket)

    delivered = await hub.broadcast(_message())

    assert delivered == 3
    assert all(len(socket.sent) == 1 for socket in open_sockets)
    assert closed.sent == []
    # closed members stay until their socket handler leaves
    assert len(hub) == 4


@pytest.mark.asyncio
async def test_broadcast_serializes_once_with_wire_field_names():
    hub = BroadcastHub()
    first, second = FakeSocket(), FakeSocket()
    _join(hub, first)
    _join(hub, second)
    message = _message(order=2, old_order=0)

    await hub.broadcast(message)

    assert first.sent == second.sent
    frame = json.loads(first.sent[0])
    assert frame == {
        "type": "UPDATE_NOTE_POSITION",
        "payload": {"noteId": str(message.payload.note_id), "order": 2, "oldOrder": 0},
    }


@pytest.mark.asyncio
async def test_send_failure_is_skipped_not_raised():
    hub = BroadcastHub()
    good = FakeSocket()
    bad = FakeSocket(fail=True)
    _join(hub, good)
    bad_connection = _join(hub, bad)

    delivered = await hub.broadcast("{}")

    assert delivered == 1
    assert good.sent == ["{}"]
    assert bad_connection in hub


@pytest.mark.asyncio
async def test_send_failure_prunes_when_configured():
    hub = BroadcastHub(prune_on_send_failure=True)
    _join(hub, FakeSocket())
    bad_connection = _join(hub, FakeSocket(fail=True))

    await hub.broadcast("{}")

    assert bad_connection not in hub
    assert len(hub) == 1


@pytest.mark.asyncio
async def test_empty_hub_broadcast_is_harmless():
    assert await BroadcastHub().broadcast("{}") == 0


def test_leave_is_idempotent():
    hub = BroadcastHub()
    connection = _join(hub, FakeSocket())
    assert hub.leave(connection) is True
    assert hub.leave(connection) is False
    assert len(hub) == 0


def test_connections_compare_by_identity():
    socket = FakeSocket()
    owner = uuid.uuid4()
    hub = BroadcastHub()
    _join(hub, socket, owner)
    _join(hub, socket, owner)
    assert len(hub) == 2


@pytest.mark.asyncio
async def test_global_scope_reaches_every_owner():
    registry = HubRegistry("global")
    alice, bob = uuid.uuid4(), uuid.uuid4()
    alice_socket, bob_socket = FakeSocket(), FakeSocket()
    registry.join(alice_socket, alice)
    registry.join(bob_socket, bob)

    delivered = await registry.broadcast(alice, "{}")

    assert delivered == 2
    assert bob_socket.sent == ["{}"]
    assert len(registry) == 1
    assert registry.connection_count() == 2


@pytest.mark.asyncio
async def test_owner_scope_only_reaches_the_owners_connections():
    registry = HubRegistry("owner")
    alice, bob = uuid.uuid4(), uuid.uuid4()
    alice_tabs = [FakeSocket(), FakeSocket()]
    bob_socket = FakeSocket()
    for socket in alice_tabs:
        registry.join(socket, alice)
    registry.join(bob_socket, bob)

    delivered = await registry.broadcast(alice, "{}")

    assert delivered == 2
    assert all(socket.sent == ["{}"] for socket in alice_tabs)
    assert bob_socket.sent == []
    assert len(registry) == 2


def test_registry_drops_empty_hubs():
    registry = HubRegistry("owner")
    connection = registry.join(FakeSocket(), uuid.uuid4())
    assert len(registry) == 1
    registry.leave(connection)
    assert len(registry) == 0
    assert registry.connection_count() == 0
    # leaving twice is harmless
    registry.leave(connection)


@pytest.mark.asyncio
async def test_broadcast_without_hub_delivers_nothing():
    assert await HubRegistry("owner").broadcast(uuid.uuid4(), "{}") == 0


def test_unknown_scope_is_rejected():
    with pytest.raises(ValueError):
        HubRegistry("room")
