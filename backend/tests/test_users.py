"""
Tests for user profile endpoints and the auth provider webhook.
"""

import pytest
from httpx import AsyncClient

from conftest import headers_for
from app.models import User

WEBHOOK = "/api/v1/users/webhook"


@pytest.fixture
def webhook_headers(settings):
    return {"X-Webhook-Secret": settings.AUTH_WEBHOOK_SECRET}


@pytest.mark.asyncio
async def test_get_me(client: AsyncClient, guest, auth_headers):
    response = await client.get("/api/v1/users/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["id"] == guest.id
    assert response.json()["role"] == "user"


@pytest.mark.asyncio
async def test_recent_cities_keep_latest_three(client: AsyncClient, auth_headers):
    for city in ["Lisbon", "Porto", "Faro", "Porto", "Braga"]:
        response = await client.post("/api/v1/users/recent-cities", json={"city": city}, headers=auth_headers)
        assert response.status_code == 200

    assert response.json()["recent_searched_cities"] == ["Faro", "Porto", "Braga"]


@pytest.mark.asyncio
async def test_auth_webhook_requires_secret(client: AsyncClient):
    response = await client.post(
        WEBHOOK,
        json={"type": "user.created", "data": {"id": "user_new"}},
        headers={"X-Webhook-Secret": "nope"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_auth_webhook_creates_and_updates_user(client: AsyncClient, db_session, webhook_headers):
    created = await client.post(
        WEBHOOK,
        json={"type": "user.created", "data": {"id": "user_new", "email": "new@example.com", "username": "newbie"}},
        headers=webhook_headers,
    )
    assert created.status_code == 200

    user = await db_session.get(User, "user_new")
    assert user.email == "new@example.com"
    assert user.role == "user"

    await client.post(
        WEBHOOK,
        json={"type": "user.updated", "data": {"id": "user_new", "username": "veteran"}},
        headers=webhook_headers,
    )
    me = await client.get("/api/v1/users/me", headers=headers_for(user))
    assert me.json()["username"] == "veteran"
    assert me.json()["email"] == "new@example.com"


@pytest.mark.asyncio
async def test_deleted_user_is_locked_out(client: AsyncClient, guest, auth_headers, webhook_headers):
    response = await client.post(
        WEBHOOK, json={"type": "user.deleted", "data": {"id": guest.id}}, headers=webhook_headers
    )
    assert response.status_code == 200

    me = await client.get("/api/v1/users/me", headers=auth_headers)
    assert me.status_code == 401


@pytest.mark.asyncio
async def test_unknown_webhook_type(client: AsyncClient, webhook_headers):
    response = await client.post(
        WEBHOOK, json={"type": "session.created", "data": {"id": "x"}}, headers=webhook_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_lists_users(client: AsyncClient, guest, owner, admin, auth_headers):
    response = await client.get("/api/v1/users/", headers=headers_for(admin))

    assert response.status_code == 200
    assert {u["id"] for u in response.json()} == {guest.id, owner.id, admin.id}

    forbidden = await client.get("/api/v1/users/", headers=auth_headers)
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_admin_updates_role(client: AsyncClient, guest, admin, auth_headers):
    response = await client.put(
        f"/api/v1/users/{guest.id}/role", json={"role": "hotel_owner"}, headers=headers_for(admin)
    )
    assert response.status_code == 200
    assert response.json()["role"] == "hotel_owner"

    me = await client.get("/api/v1/users/me", headers=auth_headers)
    assert me.json()["role"] == "hotel_owner"


@pytest.mark.asyncio
async def test_role_update_rules(client: AsyncClient, guest, other_guest, admin):
    unknown_role = await client.put(
        f"/api/v1/users/{guest.id}/role", json={"role": "superuser"}, headers=headers_for(admin)
    )
    assert unknown_role.status_code == 422

    unknown_user = await client.put(
        "/api/v1/users/nobody/role", json={"role": "admin"}, headers=headers_for(admin)
    )
    assert unknown_user.status_code == 404
    assert unknown_user.json()["code"] == "USER_NOT_FOUND"

    own_role = await client.put(
        f"/api/v1/users/{admin.id}/role", json={"role": "user"}, headers=headers_for(admin)
    )
    assert own_role.status_code == 403

    not_admin = await client.put(
        f"/api/v1/users/{other_guest.id}/role", json={"role": "admin"}, headers=headers_for(guest)
    )
    assert not_admin.status_code == 403
    assert not_admin.json()["code"] == "FORBIDDEN"
