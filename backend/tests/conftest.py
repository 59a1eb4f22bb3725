"""Shared pytest fixtures backed by a throwaway SQLite file per test."""

import logging
import os
from uuid import uuid4

import pytest
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# must be set before the app module is imported anywhere
os.environ.setdefault("NOTEBOARD_SKIP_LIFESPAN_DB", "1")

from src.noteboard.core.models import BaseModel, Note, Tag, User  # noqa: E402
from src.noteboard.core.positioning import OwnerLocks  # noqa: E402
from src.noteboard.core.services.position_store import PositionStore  # noqa: E402
from src.noteboard.security.jwt import create_access_token  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@pytest.fixture
async def test_engine(tmp_path):
    """SQLite file engine; every session gets its own connection like on PostgreSQL."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'noteboard.db'}",
        echo=False,
        poolclass=NullPool,
    )

    # SQLite only enforces foreign keys (and so ON DELETE CASCADE) when asked to
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def owner_locks():
    """Fresh lock registry so tests never share lock state."""
    return OwnerLocks()


@pytest.fixture
def make_user(test_session):
    async def _make(username=None, password_hash="not-a-real-hash", is_active=True):
        user = User(
            username=username or f"user_{uuid4().hex[:8]}",
            password_hash=password_hash,
            full_name="Test User",
            is_active=is_active,
        )
        test_session.add(user)
        await test_session.commit()
        await test_session.refresh(user)
        return user

    return _make


@pytest.fixture
async def test_user(make_user):
    return await make_user("alice")


@pytest.fixture
async def other_user(make_user):
    return await make_user("bob")


@pytest.fixture
def make_tag(test_session):
    async def _make(name="Work", owner=None, color="blue"):
        tag = Tag(
            label=Tag.make_label(name),
            code=Tag.make_code(name),
            color=color,
            owner_id=owner.id if owner is not None else None,
        )
        test_session.add(tag)
        await test_session.commit()
        await test_session.refresh(tag)
        return tag

    return _make


@pytest.fixture
async def system_tag(make_tag):
    return await make_tag("General")


@pytest.fixture
def make_notes(session_factory, owner_locks):
    """Create notes through the position store so they get dense orders 0..N-1."""

    async def _make(owner, tag, titles):
        notes = []
        async with session_factory() as session:
            store = PositionStore(session, locks=owner_locks)
            for title in titles:
                notes.append(
                    await store.add_note(
                        {"title": title, "content": f"{title} body", "tag_id": tag.id, "owner_id": owner.id}
                    )
                )
        return notes

    return _make


@pytest.fixture
def board(session_factory):
    """Read an owner's notes back as ``{title: order}`` from a fresh session."""

    async def _read(owner):
        async with session_factory() as session:
            result = await session.execute(
                select(Note.title, Note.order_index).where(Note.owner_id == owner.id)
            )
            return {title: order for title, order in result.all()}

    return _read


@pytest.fixture
def auth_headers(test_user):
    """Authorization header with a valid JWT for ``test_user``."""
    access_token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {access_token}"}
