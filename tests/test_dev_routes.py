import pytest

from qios.core.config import settings

from conftest import STORE_ID


async def dev_sale(client, shop, quantity=2):
    return await client.post("/api/dev/create-transaction", json={
        "customerName": "Dewi",
        "customerPhone": "0813",
        "items": [{"productId": shop["latte"].id, "quantity": quantity}],
    })


@pytest.mark.asyncio
async def test_dev_routes_hidden_outside_development(client, monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")
    resp = await client.post("/api/dev/reset-all")
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "error": "Not available"}


@pytest.mark.asyncio
async def test_ensure_store_is_idempotent(client):
    first = (await client.post("/api/dev/ensure-store")).json()
    second = (await client.post("/api/dev/ensure-store")).json()
    assert first["store"]["id"] == second["store"]["id"] == "default-store"
    assert first["store"]["name"] == "Coffee Shop - Dev Testing"


@pytest.mark.asyncio
async def test_products_with_recipes(client, shop):
    body = (await client.get("/api/dev/products")).json()
    assert body["count"] == 2
    latte = next(p for p in body["products"] if p["name"] == "Latte")
    assert {r["rawMaterial"]["name"] for r in latte["recipes"]} == {"Kopi Beans", "Susu"}


@pytest.mark.asyncio
async def test_transaction_pay_and_cancel_flow(client, shop):
    resp = await dev_sale(client, shop)
    assert resp.status_code == 201
    order_id = resp.json()["orderId"]

    pending = (await client.get("/api/dev/pending-orders")).json()["orders"]
    assert [o["id"] for o in pending] == [order_id]
    assert pending[0]["customerName"] == "Dewi"

    resp = await client.post("/api/dev/tarik-dana", json={"orderId": order_id})
    assert resp.json()["success"] is True
    assert (await client.get("/api/dev/pending-orders")).json()["orders"] == []

    order = (await client.get(f"/api/orders/{order_id}", params={"storeId": STORE_ID})).json()
    assert order["status"] == "COMPLETED"
    assert order["paymentMethod"] == "QRIS"

    resp = await client.post("/api/dev/cancel-order", json={"orderId": order_id})
    assert resp.json() == {"success": True}


@pytest.mark.asyncio
async def test_generate_supply_resets_raw_materials(client, shop):
    await dev_sale(client, shop)

    body = (await client.post("/api/dev/generate-supply")).json()
    assert body["summary"]["itemsReset"] == 2
    assert {"name": "Kopi Beans", "resetTo": "5000gram"} in body["summary"]["details"]

    materials = (await client.get("/api/inventory/raw-materials", params={"storeId": STORE_ID})).json()
    assert {m["name"]: m["stock"] for m in materials["rawMaterials"]} == {"Kopi Beans": 5000, "Susu": 10000}


@pytest.mark.asyncio
async def test_reset_all_counts(client, shop):
    await dev_sale(client, shop)

    body = (await client.post("/api/dev/reset-all")).json()
    summary = body["summary"]
    assert summary["orders"] == 1
    assert summary["orderItems"] == 1
    assert summary["customers"] == 1
    assert summary["stockMovements"] == 1
    assert summary["movements"] == 2
    assert summary["notifications"] == 1

    products = (await client.get("/api/products", params={"storeId": STORE_ID})).json()
    assert len(products["products"]) == 2
