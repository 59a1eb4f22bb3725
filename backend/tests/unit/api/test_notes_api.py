"""Unit tests for the notes router (src/noteboard/api/notes.py)."""

import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import OperationalError
from starlette.websockets import WebSocketState

from src.noteboard.api.deps import get_dispatcher
from src.noteboard.core.exceptions import ForbiddenError, InvalidOrderError, NotFoundError
from src.noteboard.core.schemas.notes import NoteListResponse, NoteResponse, PositionResponse
from src.noteboard.core.schemas.realtime import CoordinateMove, ReorderMove
from src.noteboard.core.schemas.tags import TagSummary
from src.noteboard.core.services.note_service import NoteService
from src.noteboard.main import app
from src.noteboard.realtime import CommandDispatcher, HubRegistry


def _note_response(owner_id, title="Retro", order=0):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return NoteResponse(
        id=uuid.uuid4(),
        title=title,
        content="body",
        tag=TagSummary(id=uuid.uuid4(), code="work", label="Work", color="blue"),
        owner_id=owner_id,
        position=PositionResponse(x=0.0, y=0.0, order=order, last_moved_at=1_700_000_000),
        created_at=now,
        updated_at=now,
    )


def test_create_note(monkeypatch, client, user_id):
    called = {}

    async def fake_create(self, uid, request):
        called["args"] = (uid, request)
        return _note_response(uid, title=request.title, order=4)

    monkeypatch.setattr(NoteService, "create_note", fake_create)

    resp = client.post("/api/notes/", json={"title": "Retro", "content": "body", "tag": "work"})

    assert resp.status_code == 201
    data = resp.json()
    assert data["position"] == {"x": 0.0, "y": 0.0, "order": 4, "last_moved_at": 1_700_000_000}
    assert data["tag"]["code"] == "work"
    assert called["args"][0] == user_id


def test_create_note_requires_tag(client):
    resp = client.post("/api/notes/", json={"title": "Retro", "content": "body"})
    assert resp.status_code == 422


def test_list_notes_passes_paging_and_tag(monkeypatch, client, user_id):
    called = {}

    async def fake_list(self, user_id, page, per_page, tag_code):
        called.update(page=page, per_page=per_page, tag_code=tag_code)
        return NoteListResponse.create(items=[_note_response(user_id)], total=1, page=page, per_page=per_page)

    monkeypatch.setattr(NoteService, "list_user_notes", fake_list)

    resp = client.get("/api/notes/?page=2&tag=work")

    assert resp.status_code == 200
    assert called == {"page": 2, "per_page": 10, "tag_code": "work"}
    assert resp.json()["total"] == 1


def test_list_notes_rejects_huge_pages(client):
    assert client.get("/api/notes/?per_page=1000").status_code == 422


def test_application_errors_use_error_body(monkeypatch, client):
    note_id = uuid.uuid4()

    async def fake_get(self, nid, uid):
        raise NotFoundError("Note", nid)

    monkeypatch.setattr(NoteService, "get_note", fake_get)

    resp = client.get(f"/api/notes/{note_id}")

    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == "NOT_FOUND"
    assert body["details"] == {"resource_type": "Note", "resource_id": str(note_id)}
    assert "timestamp" in body


def test_update_refuses_position_fields(client):
    resp = client.put(f"/api/notes/{uuid.uuid4()}", json={"order": 2})
    assert resp.status_code == 422


def test_delete_note(monkeypatch, client, user_id):
    deleted = []

    async def fake_delete(self, nid, uid):
        deleted.append((nid, uid))

    monkeypatch.setattr(NoteService, "delete_note", fake_delete)
    note_id = uuid.uuid4()

    resp = client.delete(f"/api/notes/{note_id}")

    assert resp.status_code == 204
    assert deleted == [(note_id, user_id)]


def test_position_reorder_goes_through_dispatcher(client, dispatcher, user_id):
    note_id = uuid.uuid4()

    resp = client.put(f"/api/notes/{note_id}/position", json={"order": 3})

    assert resp.status_code == 200
    assert resp.json() == {
        "type": "UPDATE_NOTE_POSITION",
        "payload": {"noteId": str(note_id), "order": 3, "oldOrder": 0},
    }
    ((owner, command),) = dispatcher.applied
    assert owner == user_id
    assert command == ReorderMove(note_id=note_id, order=3)


def test_position_move_goes_through_dispatcher(client, dispatcher):
    note_id = uuid.uuid4()

    resp = client.put(f"/api/notes/{note_id}/position", json={"x": 10, "y": 20.5})

    assert resp.status_code == 200
    assert resp.json()["payload"] == {
        "noteId": str(note_id),
        "x": 10.0,
        "y": 20.5,
        "lastMovedAt": 1_700_000_000,
    }
    assert isinstance(dispatcher.applied[0][1], CoordinateMove)


def test_position_rejects_mixed_body(client, dispatcher):
    resp = client.put(f"/api/notes/{uuid.uuid4()}/position", json={"x": 1, "y": 2, "order": 0})
    assert resp.status_code == 422
    assert dispatcher.applied == []


def test_position_errors_map_to_status(client, dispatcher):
    dispatcher.error = ForbiddenError()
    assert client.put(f"/api/notes/{uuid.uuid4()}/position", json={"order": 0}).status_code == 403

    dispatcher.error = InvalidOrderError(9, 3)
    resp = client.put(f"/api/notes/{uuid.uuid4()}/position", json={"order": 9})
    assert resp.status_code == 400
    assert resp.json()["error"] == "INVALID_ORDER"


def test_position_update_is_broadcast(client, hubs, user_id):
    class Socket:
        client_state = WebSocketState.CONNECTED
        application_state = WebSocketState.CONNECTED

        def __init__(self):
            self.sent = []

        async def send_text(self, text):
            self.sent.append(text)

    socket = Socket()
    hubs.join(socket, uuid.uuid4())

    client.put(f"/api/notes/{uuid.uuid4()}/position", json={"order": 1})

    assert len(socket.sent) == 1


def test_position_storage_failure_is_a_structured_500(client):
    class UnreachableDatabase:
        def __call__(self):
            return self

        async def __aenter__(self):
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("database is down"))

        async def __aexit__(self, *exc_info):
            return False

    app.dependency_overrides[get_dispatcher] = lambda: CommandDispatcher(UnreachableDatabase(), HubRegistry("global"))

    resp = client.put(f"/api/notes/{uuid.uuid4()}/position", json={"order": 0})

    assert resp.status_code == 500
    assert resp.json()["error"] == "STORAGE_ERROR"
