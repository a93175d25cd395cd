"""Signup/login and preferences endpoints over a throwaway SQLite database."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from daybook.core.db import get_session
from daybook.core.security import create_access_token, decode_access_token, hash_password, verify_password
from daybook.main import app


@pytest.fixture
def client(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    asyncio.run(create_tables())
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def session_override():
        async with maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


def _signup(client, email="owner@example.com", password="s3cret-pass"):
    return client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": password, "full_name": "Owner"},
    )


def test_token_round_trip():
    token = create_access_token(42)
    assert decode_access_token(token) == "42"
    assert decode_access_token("not-a-token") is None


def test_password_hashing():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_signup_login_me(client):
    resp = _signup(client)
    assert resp.status_code == 201
    assert resp.json()["token_type"] == "bearer"

    assert _signup(client).status_code == 409

    login = client.post(
        "/api/v1/auth/login", json={"email": "owner@example.com", "password": "s3cret-pass"}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "owner@example.com"


def test_bad_login(client):
    _signup(client)
    resp = client.post(
        "/api/v1/auth/login", json={"email": "owner@example.com", "password": "nope-nope"}
    )
    assert resp.status_code == 401


def test_requires_token(client):
    assert client.get("/api/v1/slots", params={"date": "2026-03-10"}).status_code == 401


def test_preferences_defaults_and_update(client):
    token = _signup(client).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    prefs = client.get("/api/v1/preferences", headers=headers).json()
    assert prefs == {
        "min_time_between_appointments": 90,
        "business_hours_start": "08:00:00",
        "business_hours_end": "18:00:00",
        "slot_granularity_minutes": 30,
    }

    resp = client.put(
        "/api/v1/preferences",
        headers=headers,
        json={"business_hours_start": "09:00", "min_time_between_appointments": 0},
    )
    assert resp.status_code == 200
    assert resp.json()["business_hours_start"] == "09:00:00"

    bad = client.put("/api/v1/preferences", headers=headers, json={"business_hours_end": "07:00"})
    assert bad.status_code == 422

    offset = client.put("/api/v1/preferences", headers=headers, json={"business_hours_start": "09:00+02:00"})
    assert offset.status_code == 422


def test_booking_end_to_end(client):
    token = _signup(client).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}
    payload = {"date": "2099-03-10", "start_time": "10:00", "duration_minutes": 60}

    assert client.post("/api/v1/bookings", headers=headers, json=payload).status_code == 201
    clash = client.post(
        "/api/v1/bookings", headers=headers, json={**payload, "start_time": "10:30"}
    )
    assert clash.status_code == 409

    grid = client.get(
        "/api/v1/slots", headers=headers, params={"date": "2099-03-10", "duration": 30}
    ).json()
    slots = {s["start_time"]: s for s in grid["slots"]}
    assert slots["10:00:00"]["available"] is False
    assert slots["09:00:00"]["warning"] == "30 min gap, 90 recommended."
