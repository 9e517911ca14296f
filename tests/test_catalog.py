import pytest

from qios.core.constants import StockStatus
from qios.services.inventory import stock_status

from conftest import STORE_ID


def product_body(**extra):
    body = {
        "storeId": STORE_ID,
        "sku": "COFFEE-AMERICANO",
        "name": "Americano",
        "category": "Coffee",
        "price": 25000,
        "cost": 3000,
        "stockQuantity": 30,
        "minStockLevel": 5,
    }
    body.update(extra)
    return body


@pytest.mark.asyncio
async def test_create_product_and_duplicate_sku(client, shop):
    resp = await client.post("/api/products", json=product_body())
    assert resp.status_code == 201
    assert resp.json()["sku"] == "COFFEE-AMERICANO"
    assert resp.json()["price"] == 25000

    resp = await client.post("/api/products", json=product_body(name="Another"))
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "error": "SKU already exists"}


@pytest.mark.asyncio
async def test_list_products_filters(client, shop):
    resp = await client.get("/api/products", params={"storeId": STORE_ID})
    assert [p["name"] for p in resp.json()["products"]] == ["Latte", "Roti"]

    resp = await client.get("/api/products", params={"storeId": STORE_ID, "category": "Snacks"})
    assert [p["name"] for p in resp.json()["products"]] == ["Roti"]

    resp = await client.get("/api/products", params={"storeId": STORE_ID, "search": "coffee-lat"})
    assert [p["sku"] for p in resp.json()["products"]] == ["COFFEE-LATTE"]

    resp = await client.get("/api/products", params={"storeId": "store-2"})
    assert resp.json()["products"] == []


@pytest.mark.asyncio
async def test_missing_store_id(client, shop, monkeypatch):
    from qios.core.config import settings

    monkeypatch.setattr(settings, "default_store_id", None)
    resp = await client.get("/api/products")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Store ID required"


@pytest.mark.asyncio
async def test_add_recipe_upserts(client, shop):
    roti, kopi = shop["roti"], shop["kopi"]
    url = f"/api/products/{roti.id}/recipes"

    resp = await client.post(url, params={"storeId": STORE_ID}, json={"rawMaterialId": kopi.id, "quantity": 5})
    assert resp.status_code == 201
    assert resp.json()["rawMaterial"]["name"] == "Kopi Beans"

    resp = await client.post(url, params={"storeId": STORE_ID}, json={"rawMaterialId": kopi.id, "quantity": 7})
    assert resp.json()["quantity"] == 7

    resp = await client.post(url, params={"storeId": STORE_ID}, json={"rawMaterialId": "nope", "quantity": 1})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid raw material"

    products = (await client.get("/api/products", params={"storeId": STORE_ID, "search": "roti"})).json()
    assert products["products"][0]["isFinishedProduct"] is True


@pytest.mark.asyncio
async def test_customers(client, shop):
    resp = await client.post(
        "/api/customers", json={"storeId": STORE_ID, "name": "Andi", "phone": "0812000111"}
    )
    assert resp.status_code == 201
    assert resp.json()["totalSpent"] == 0

    resp = await client.post(
        "/api/customers", json={"storeId": STORE_ID, "name": "Andi 2", "phone": "0812000111"}
    )
    assert resp.status_code == 409

    resp = await client.post("/api/customers", json={"storeId": STORE_ID, "name": "No phone"})
    assert resp.status_code == 400

    resp = await client.get("/api/customers", params={"storeId": STORE_ID})
    assert [c["name"] for c in resp.json()["customers"]] == ["Andi"]


def test_stock_status_thresholds():
    assert stock_status(0, 5) == StockStatus.OUT_OF_STOCK
    assert stock_status(-1, 5) == StockStatus.OUT_OF_STOCK
    assert stock_status(5, 5) == StockStatus.LOW_STOCK
    assert stock_status(6, 5) == StockStatus.IN_STOCK


@pytest.mark.asyncio
async def test_inventory_summary(client, session, shop):
    shop["roti"].stock_quantity = 2
    await session.commit()

    resp = await client.get("/api/inventory", params={"storeId": STORE_ID})
    assert resp.status_code == 200
    body = resp.json()

    assert body["totalProducts"] == 2
    assert body["lowStockCount"] == 1
    assert body["outOfStockCount"] == 0
    # 50 * 5700 + 2 * 8000
    assert body["totalStockValue"] == 301000
    statuses = {p["name"]: p["status"] for p in body["products"]}
    assert statuses == {"Latte": "IN_STOCK", "Roti": "LOW_STOCK"}
    assert [p["name"] for p in body["lowStockProducts"]] == ["Roti"]
    assert {m["name"] for m in body["rawMaterials"]} == {"Kopi Beans", "Susu"}


@pytest.mark.asyncio
async def test_raw_materials(client, shop):
    resp = await client.post(
        "/api/inventory/raw-materials",
        json={"storeId": STORE_ID, "name": "Gula", "unit": "gram", "stock": 2000, "minStockLevel": 400, "cost": 20},
    )
    assert resp.status_code == 201
    assert resp.json()["initialStock"] == 2000

    resp = await client.get("/api/inventory/raw-materials", params={"storeId": STORE_ID})
    assert [m["name"] for m in resp.json()["rawMaterials"]] == ["Gula", "Kopi Beans", "Susu"]


@pytest.mark.asyncio
async def test_expenses(client, shop):
    resp = await client.post(
        "/api/expenses",
        json={"storeId": STORE_ID, "date": "2026-01-05", "amount": 150000, "category": "Supplies"},
    )
    assert resp.status_code == 201

    resp = await client.get(
        "/api/expenses", params={"storeId": STORE_ID, "startDate": "2026-01-01", "endDate": "2026-01-31"}
    )
    assert [e["amount"] for e in resp.json()["expenses"]] == [150000]

    resp = await client.get(
        "/api/expenses", params={"storeId": STORE_ID, "startDate": "2026-02-01"}
    )
    assert resp.json()["expenses"] == []
