"""Fixtures for router tests: the real app with auth and database stubbed out."""

import uuid

import pytest
from fastapi.testclient import TestClient

from src.noteboard.api.deps import get_dispatcher, get_hub_registry
from src.noteboard.core.schemas.realtime import (
    MoveApplied,
    OutboundMessage,
    ReorderApplied,
    ReorderMove,
)
from src.noteboard.database import get_db_session
from src.noteboard.main import app
from src.noteboard.middleware.auth import get_current_user_id
from src.noteboard.realtime import CommandDispatcher, HubRegistry


class FakeDispatcher(CommandDispatcher):
    """Real decode and broadcast, canned storage."""

    def __init__(self, hubs, error=None):
        super().__init__(session_factory=None, hubs=hubs, max_frame_bytes=4096)
        self.applied = []
        self.error = error
        self.errors = {}

    async def apply(self, owner_id, command):
        self.applied.append((owner_id, command))
        error = self.error or self.errors.get(command.note_id)
        if error is not None:
            raise error
        if isinstance(command, ReorderMove):
            payload = ReorderApplied(note_id=command.note_id, order=command.order, old_order=0)
        else:
            payload = MoveApplied(note_id=command.note_id, x=command.x, y=command.y, last_moved_at=1_700_000_000)
        return OutboundMessage(payload=payload)


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def hubs():
    return HubRegistry("global")


@pytest.fixture
def dispatcher(hubs):
    return FakeDispatcher(hubs)


@pytest.fixture
def client(user_id, hubs, dispatcher):
    async def _no_db():
        yield None

    app.dependency_overrides[get_db_session] = _no_db
    app.dependency_overrides[get_current_user_id] = lambda: user_id
    app.dependency_overrides[get_hub_registry] = lambda: hubs
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()
