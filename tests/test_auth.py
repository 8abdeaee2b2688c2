from types import SimpleNamespace

import pytest
from httpx import AsyncClient

TEST_PASSWORD = "StrongPass123"


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, world: SimpleNamespace) -> None:
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "rahima@example.com", "password": TEST_PASSWORD},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["role"] == "teacher"

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "rahima@example.com"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, world: SimpleNamespace) -> None:
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "rahima@example.com", "password": "not-the-password"},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_login_oauth_form(client: AsyncClient, world: SimpleNamespace) -> None:
    resp = await client.post(
        "/api/v1/auth/login-oauth",
        data={"username": "chair@example.com", "password": TEST_PASSWORD},
    )
    assert resp.status_code == 200
    assert resp.json()["access_token"]


@pytest.mark.asyncio
async def test_bad_token(client: AsyncClient, world: SimpleNamespace) -> None:
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nonsense"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_creates_user(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {
        "name": "New Teacher",
        "email": "new.teacher@example.com",
        "password": "AnotherPass123",
        "role": "teacher",
        "employee_id": "T-300",
    }
    resp = await client.post("/api/v1/auth/users", json=body, headers=headers_for(world.admin))
    assert resp.status_code == 201
    assert resp.json()["role"] == "teacher"

    dup = await client.post("/api/v1/auth/users", json=body, headers=headers_for(world.admin))
    assert dup.status_code == 409


@pytest.mark.asyncio
async def test_non_admin_cannot_create_user(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {
        "name": "Someone",
        "email": "someone@example.com",
        "password": "AnotherPass123",
        "role": "chairman",
    }
    resp = await client.post("/api/v1/auth/users", json=body, headers=headers_for(world.teacher))
    assert resp.status_code == 403
