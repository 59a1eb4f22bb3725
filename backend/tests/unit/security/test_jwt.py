"""Unit tests for security/jwt.py"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from src.noteboard.security import jwt as jwt_module
from src.noteboard.security.jwt import (
    blacklist_token,
    create_access_token,
    decode_access_token,
    get_user_id_from_token,
)


class DummySettings:
    secret_key = "test-secret"
    algorithm = "HS256"
    access_token_expire_minutes = 30


class FakeRedisClient:
    def __init__(self):
        self.blacklist = {}

    async def is_token_blacklisted(self, jti):
        return jti in self.blacklist

    async def add_to_blacklist(self, jti, expire):
        self.blacklist[jti] = expire
        return True


@pytest.fixture
def redis(monkeypatch):
    client = FakeRedisClient()
    monkeypatch.setattr(jwt_module, "get_settings", lambda: DummySettings())
    monkeypatch.setattr(jwt_module, "get_redis_client", lambda: client)
    return client


async def test_create_and_decode_access_token(redis):
    sub = str(uuid.uuid4())
    token = create_access_token({"sub": sub}, expires_delta=timedelta(minutes=5))

    payload = await decode_access_token(token)
    assert payload["sub"] == sub
    assert payload["type"] == "access"
    assert payload["jti"]


async def test_each_token_gets_its_own_jti(redis):
    first = jwt.get_unverified_claims(create_access_token({"sub": "x"}))
    second = jwt.get_unverified_claims(create_access_token({"sub": "x"}))
    assert first["jti"] != second["jti"]


async def test_invalid_signature_is_rejected(redis):
    token = jwt.encode({"sub": "x", "type": "access"}, "other-secret", algorithm="HS256")
    assert await decode_access_token(token) is None


async def test_expired_token_is_rejected(redis):
    token = create_access_token({"sub": "x"}, expires_delta=timedelta(seconds=-1))
    assert await decode_access_token(token) is None


async def test_non_access_token_is_rejected(redis):
    token = jwt.encode(
        {"sub": "x", "type": "refresh", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        DummySettings.secret_key,
        algorithm="HS256",
    )
    assert await decode_access_token(token) is None


async def test_get_user_id_from_token(redis):
    uid = uuid.uuid4()
    assert await get_user_id_from_token(create_access_token({"sub": str(uid)})) == uid
    assert await get_user_id_from_token(create_access_token({"sub": "not-a-uuid"})) is None
    assert await get_user_id_from_token(create_access_token({})) is None
    assert await get_user_id_from_token("garbage") is None


async def test_blacklisted_token_stops_working(redis):
    token = create_access_token({"sub": str(uuid.uuid4())})

    assert await blacklist_token(token) is True

    (jti, ttl), = redis.blacklist.items()
    assert 0 < ttl <= DummySettings.access_token_expire_minutes * 60
    assert await decode_access_token(token) is None


async def test_blacklisting_garbage_fails(redis):
    assert await blacklist_token("garbage") is False
    assert redis.blacklist == {}
