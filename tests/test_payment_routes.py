import httpx
import pytest

from qios.api.payment_routes import get_gateway_factory
from qios.main import app
from qios.services.payment_gateways import PaymentGatewayConfig, PaymentGatewayFactory
from qios.services.payment_gateways.bank import BankConfig
from qios.services.payment_gateways.utility import UtilityConfig

from conftest import STORE_ID


def vendor(request):
    if request.url.path == "/virtual-account":
        return httpx.Response(200, json={"virtualAccountNumber": "8001234567"})
    if request.url.path.startswith("/payment-status/"):
        return httpx.Response(200, json={"status": "PAID"})
    if request.url.path == "/bill/check/5300001":
        return httpx.Response(200, json={"status": "UNPAID", "billAmount": 245000, "dueDate": "2026-11-20"})
    return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def gateways(client):
    factory = PaymentGatewayFactory(
        PaymentGatewayConfig(
            bca=BankConfig(api_key="bca-key", base_url="https://bca.test"),
            pln=UtilityConfig(api_key="pln-key", base_url="https://pln.test"),
        ),
        transport=httpx.MockTransport(vendor),
    )
    app.dependency_overrides[get_gateway_factory] = lambda: factory
    return factory


def create_body(order_id, gateway="bca", method="virtual_account"):
    return {
        "gatewayType": gateway,
        "paymentMethod": method,
        "orderId": order_id,
        "amount": 33300,
        "customerDetails": {"firstName": "Budi", "phone": "0812"},
        "itemDetails": [{"id": "p1", "price": 30000, "quantity": 1, "name": "Latte"}],
    }


@pytest.mark.asyncio
async def test_list_gateways(client, gateways):
    resp = await client.get("/api/payment/gateways")
    body = resp.json()
    assert body["success"] is True
    assert [g["type"] for g in body["data"]] == ["bca", "pln"]
    assert body["data"][0]["supportedMethods"] == ["virtual_account"]


@pytest.mark.asyncio
async def test_create_payment(client, gateways):
    resp = await client.post("/api/payment/create", json=create_body("ORD-1"))
    assert resp.status_code == 200
    assert resp.json()["virtualAccountNumber"] == "8001234567"


@pytest.mark.asyncio
async def test_unconfigured_gateway_is_400(client, gateways):
    resp = await client.post("/api/payment/create", json=create_body("ORD-1", gateway="mandiri"))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Mandiri config not provided"


@pytest.mark.asyncio
async def test_verify_settles_the_order(client, shop, gateways):
    order = (await client.post("/api/orders", json={
        "storeId": STORE_ID,
        "customerName": "Budi",
        "customerPhone": "0812",
        "items": [{"productId": shop["latte"].id, "quantity": 1}],
    })).json()

    resp = await client.post("/api/payment/verify", json={"gatewayType": "bca", "orderId": order["id"]})
    body = resp.json()
    assert body["status"] == "PAID"
    assert body["paymentType"] == "BCA_VIRTUAL_ACCOUNT"
    assert body["orderPaid"] is True

    resp = await client.get(f"/api/orders/{order['id']}", params={"storeId": STORE_ID})
    assert resp.json()["paymentStatus"] == "PAID"

    resp = await client.get("/api/notifications", params={"storeId": STORE_ID})
    assert "Payment Confirmed" in [n["title"] for n in resp.json()["notifications"]]


@pytest.mark.asyncio
async def test_check_utility_bill(client, gateways):
    resp = await client.get("/api/payment/bill/pln/5300001")
    assert resp.status_code == 200
    body = resp.json()
    assert body["billAmount"] == 245000
    assert body["dueDate"] == "2026-11-20"
    assert body["status"] == "UNPAID"

    resp = await client.get("/api/payment/bill/pln/999")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_bill_check_only_for_utilities(client, gateways):
    resp = await client.get("/api/payment/bill/bca/5300001")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Bill check not supported for bca"

    resp = await client.get("/api/payment/bill/pdam/5300001")
    assert resp.status_code == 400
    assert resp.json()["error"] == "PDAM config not provided"
