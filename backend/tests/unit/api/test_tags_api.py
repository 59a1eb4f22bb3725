"""Unit tests for the tags router (src/noteboard/api/tags.py)."""

import uuid
from datetime import datetime, timezone

from src.noteboard.core.exceptions import ConflictError, ForbiddenError
from src.noteboard.core.schemas.tags import TagResponse
from src.noteboard.core.services.tag_service import TagService


def _tag(owner_id, code="work", color="blue"):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return TagResponse(
        id=uuid.uuid4(),
        code=code,
        label=code.capitalize(),
        color=color,
        owner_id=owner_id,
        is_system=owner_id is None,
        created_at=now,
        updated_at=now,
    )


def test_create_tag(monkeypatch, client, user_id):
    async def fake_create(self, uid, request):
        return _tag(uid, code="work", color=request.color.value)

    monkeypatch.setattr(TagService, "create_tag", fake_create)

    resp = client.post("/api/tags/", json={"name": "Work", "color": "green"})

    assert resp.status_code == 201
    assert resp.json()["color"] == "green"
    assert resp.json()["owner_id"] == str(user_id)


def test_create_tag_rejects_unknown_color(client):
    assert client.post("/api/tags/", json={"name": "Work", "color": "purple"}).status_code == 422


def test_create_tag_conflict(monkeypatch, client):
    async def fake_create(self, uid, request):
        raise ConflictError("Tag 'work' already exists", {"code": "work"})

    monkeypatch.setattr(TagService, "create_tag", fake_create)

    resp = client.post("/api/tags/", json={"name": "Work"})
    assert resp.status_code == 409
    assert resp.json()["details"] == {"code": "work"}


def test_list_tags(monkeypatch, client, user_id):
    async def fake_list(self, uid):
        return [_tag(None, code="general"), _tag(uid, code="mine")]

    monkeypatch.setattr(TagService, "list_tags", fake_list)

    resp = client.get("/api/tags/")
    assert resp.status_code == 200
    assert [(t["code"], t["is_system"]) for t in resp.json()] == [("general", True), ("mine", False)]


def test_update_system_tag_is_forbidden(monkeypatch, client):
    async def fake_update(self, tag_id, uid, request):
        raise ForbiddenError("System tags cannot be modified")

    monkeypatch.setattr(TagService, "update_tag", fake_update)

    resp = client.patch(f"/api/tags/{uuid.uuid4()}", json={"color": "red"})
    assert resp.status_code == 403
    assert resp.json()["message"] == "System tags cannot be modified"


def test_update_needs_a_field(client):
    assert client.patch(f"/api/tags/{uuid.uuid4()}", json={}).status_code == 422


def test_delete_tag(monkeypatch, client):
    deleted = []

    async def fake_delete(self, tag_id, uid):
        deleted.append(tag_id)
        return 1

    monkeypatch.setattr(TagService, "delete_tag", fake_delete)
    tag_id = uuid.uuid4()

    assert client.delete(f"/api/tags/{tag_id}").status_code == 204
    assert deleted == [tag_id]
