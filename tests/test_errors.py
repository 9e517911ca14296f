import pytest
from httpx import ASGITransport, AsyncClient

from qios.db import get_db
from qios.main import app

from conftest import STORE_ID


def broken_db():
    raise RuntimeError("connection refused")


@pytest.mark.asyncio
async def test_unexpected_error_is_a_generic_500():
    app.dependency_overrides[get_db] = broken_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/api/products", params={"storeId": STORE_ID})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}


@pytest.mark.asyncio
async def test_validation_error_is_400(client):
    resp = await client.post("/api/customers", json={"storeId": STORE_ID})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Missing required fields"
    assert body["details"]
