import pytest

from qios.core.config import settings
from qios.middleware.auth_middleware import is_protected

from conftest import STORE_ID


async def register(client, username="kasir_1", email="kasir1@example.com", password="rahasia123"):
    return await client.post("/api/auth/register", json={
        "username": username,
        "email": email,
        "password": password,
        "storeId": STORE_ID,
    })


async def login(client, username="kasir_1", password="rahasia123"):
    return await client.post("/api/auth/login", json={"username": username, "password": password})


@pytest.mark.asyncio
async def test_register_and_login(client, shop):
    resp = await register(client)
    assert resp.status_code == 201
    assert resp.json()["data"]["username"] == "kasir_1"

    resp = await login(client)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["token"]
    assert data["user"]["storeId"] == STORE_ID

    resp = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "kasir_1"


@pytest.mark.asyncio
async def test_duplicate_registration(client, shop):
    await register(client)
    resp = await register(client, email="other@example.com")
    assert resp.status_code == 400

    resp = await register(client, username="kasir_2")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_bad_credentials(client, shop):
    await register(client)

    resp = await login(client, password="salah-sekali")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Invalid credentials"}

    resp = await login(client, username="no such user!")
    assert resp.status_code == 401

    resp = await login(client, username="ghost")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_protected_routes_need_a_token(client, shop, monkeypatch):
    await register(client)
    token = (await login(client)).json()["data"]["token"]
    monkeypatch.setattr(settings, "environment", "production")

    resp = await client.get("/api/products", params={"storeId": STORE_ID})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Unauthorized"}

    resp = await client.get(
        "/api/products", params={"storeId": STORE_ID}, headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401

    resp = await client.get(
        "/api/products", params={"storeId": STORE_ID}, headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 200

    resp = await client.get("/health")
    assert resp.status_code == 200


def test_protected_prefixes():
    assert is_protected("/api/orders")
    assert is_protected("/api/orders/abc/cancel")
    assert is_protected("/api/inventory/raw-materials")
    assert not is_protected("/api/ordersx")
    assert not is_protected("/api/auth/login")
    assert not is_protected("/api/dev/reset-all")
