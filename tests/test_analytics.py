from datetime import datetime

import pytest

from qios.core.constants import OrderStatus
from qios.schemas.analytics import BusinessData
from qios.schemas.order import OrderCreate, OrderLineIn
from qios.services.analytics import AIAnalytics, build_business_data, get_ai_client
from qios.services.analytics.parsers import (
    calculate_trend,
    extract_recommendations,
    extract_risks,
    parse_numbered_insights,
    parse_tagged_sections,
)
from qios.services.orders import create_order

from conftest import STORE_ID

GROWTH_REPLY = """Berikut analisis pertumbuhan bisnis Anda:

1. [GROWTH] Ekspansi menu minuman dingin
Penjualan kopi susu naik konsisten, tambahkan varian es untuk musim panas.

2. [OPPORTUNITY] Program loyalitas pelanggan
Pelanggan tetap menyumbang sebagian besar omzet, berikan poin per transaksi. 3. [CHALLENGE] Biaya bahan baku
Harga susu naik dua bulan terakhir sehingga margin latte menipis.

4. [GROWTH] Ok
Too short."""


class StubClient:
    def __init__(self, reply):
        self.reply = reply
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        return self.reply


def test_tagged_sections_are_classified():
    insights = parse_tagged_sections(GROWTH_REPLY, "growth")

    assert [(i.type, i.impact) for i in insights] == [
        ("growth", "high"),
        ("opportunity", "high"),
        ("challenge", "medium"),
    ]
    assert insights[0].title == "Ekspansi menu minuman dingin"
    assert insights[2].title == "Biaya bahan baku"
    assert insights[1].description.startswith("Pelanggan tetap")
    assert all(i.confidence == 0.85 and i.actionable for i in insights)


def test_untagged_section_falls_back_to_default():
    reply = "1. [SOMETHING] Evaluasi bulan Maret\nPenjualan stabil dibanding bulan sebelumnya."
    insights = parse_tagged_sections(reply, "monthly")
    assert len(insights) == 1
    assert (insights[0].type, insights[0].impact) == ("evaluation", "medium")
    assert insights[0].title == "Evaluasi bulan Maret"


def test_trends_confidence():
    reply = "1. [SEASONAL] Lonjakan akhir pekan\nPenjualan Sabtu dan Minggu dua kali lipat hari kerja."
    insights = parse_tagged_sections(reply, "trends")
    assert insights[0].type == "seasonal"
    assert insights[0].confidence == 0.80


def test_numbered_insights():
    reply = (
        "1. Penjualan kopi meningkat\n"
        "Tren penjualan naik 20% dibanding minggu lalu.\n"
        "2. Stok roti menipis\n"
        "Peringatan: stok roti tersisa 3 pcs.\n"
    )
    insights = parse_numbered_insights(reply)
    assert [i.title for i in insights] == ["Penjualan kopi meningkat", "Stok roti menipis"]
    assert insights[0].type == "trend"
    assert (insights[1].type, insights[1].impact) == ("warning", "high")


def test_keyword_extraction():
    reply = "Kami saran menambah stok susu.\nRisiko: harga kopi naik.\nCatatan lain."
    assert extract_recommendations(reply) == ["Kami saran menambah stok susu."]
    assert extract_risks(reply) == ["Risiko: harga kopi naik."]


def test_calculate_trend():
    assert calculate_trend([]) == "insufficient data"
    assert calculate_trend([100]) == "insufficient data"
    assert calculate_trend([100, 100, 130, 130]) == "increasing"
    assert calculate_trend([100, 100, 80, 80]) == "decreasing"
    assert calculate_trend([100, 100, 105, 95]) == "stable"
    assert calculate_trend([0, 0, 10, 10]) == "increasing"


@pytest.mark.asyncio
async def test_report_kind_must_be_known():
    analytics = AIAnalytics(StubClient(""))
    with pytest.raises(ValueError):
        await analytics.generate_report("weather", BusinessData())


@pytest.mark.asyncio
async def test_cashflow_analysis():
    data = BusinessData.model_validate({
        "sales": [{"date": "2026-01-01", "amount": 100000}, {"date": "2026-01-02", "amount": 150000}],
        "expenses": [{"date": "2026-01-01", "amount": 50000, "category": "Supplies"}],
    })
    analytics = AIAnalytics(StubClient("Saran: kurangi biaya listrik.\nWarning: stok susu rendah."))

    result = await analytics.generate_cashflow_analysis(data)

    assert result.cashflow.inflow == 250000
    assert result.cashflow.outflow == 50000
    assert result.cashflow.net == 200000
    assert result.cashflow.trend == "positive"
    assert result.sales_trend == "increasing"
    assert result.expense_trend == "insufficient data"
    assert result.recommendations == ["Saran: kurangi biaya listrik."]
    assert result.risks == ["Warning: stok susu rendah."]


@pytest.mark.asyncio
async def test_inventory_insights_flag_low_stock():
    data = BusinessData.model_validate({
        "inventory": [
            {"productId": "p1", "name": "Roti", "stock": 3},
            {"productId": "p2", "name": "Croissant", "stock": 8},
            {"productId": "p3", "name": "Latte", "stock": 40},
        ]
    })
    result = await AIAnalytics(StubClient("Recommend restocking roti.")).generate_inventory_insights(data)

    alerts = {a.name: a for a in result.stock_alerts}
    assert set(alerts) == {"Roti", "Croissant"}
    assert alerts["Roti"].urgency == "high"
    assert alerts["Roti"].recommended_stock == 20
    assert alerts["Croissant"].urgency == "medium"
    assert result.recommendations == ["Recommend restocking roti."]


@pytest.mark.asyncio
async def test_business_data_snapshot(session, shop):
    await create_order(
        session,
        STORE_ID,
        OrderCreate(
            customer_name="Budi",
            customer_phone="0812",
            status=OrderStatus.COMPLETED,
            transaction_date=datetime.now(),
            items=[OrderLineIn(product_id=shop["latte"].id, quantity=1)],
        ),
    )

    data = await build_business_data(session, STORE_ID)

    assert len(data.sales) == 1
    assert data.sales[0].amount == 33300
    assert data.sales[0].customer_count == 1
    assert {i.name for i in data.inventory} == {"Latte", "Roti"}
    assert data.customers[0].frequency == 1
    assert data.period is not None


@pytest.mark.asyncio
async def test_analytics_routes_with_stub(client, shop):
    from qios.main import app

    stub = StubClient(GROWTH_REPLY)
    app.dependency_overrides[get_ai_client] = lambda: stub

    snapshot = (await client.get("/api/analytics/business-data", params={"storeId": STORE_ID})).json()
    assert snapshot["success"] is True

    resp = await client.post("/api/analytics/growth", json={"businessData": snapshot["data"]})
    assert resp.status_code == 200
    assert [i["type"] for i in resp.json()["data"]] == ["growth", "opportunity", "challenge"]
    assert "[GROWTH]" in stub.prompts[0]

    resp = await client.post("/api/analytics/insights", json={"businessData": snapshot["data"]})
    assert resp.json()["success"] is True


class FailingClient:
    async def generate(self, prompt):
        raise RuntimeError("quota exceeded")


@pytest.mark.asyncio
async def test_analytics_ai_failure_is_500(client, shop):
    from qios.main import app

    app.dependency_overrides[get_ai_client] = lambda: FailingClient()

    resp = await client.post("/api/analytics/growth", json={"businessData": {}})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}


@pytest.mark.asyncio
async def test_analytics_without_key(client, shop):
    resp = await client.post("/api/analytics/risks", json={"businessData": {}})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "AI analytics not configured"}


@pytest.mark.asyncio
async def test_report_generation_failure_is_a_fixed_500():
    from fastapi import HTTPException

    with pytest.raises(HTTPException) as exc:
        await AIAnalytics(FailingClient()).generate_report("risks", BusinessData())
    assert exc.value.status_code == 500
    assert exc.value.detail == "Internal server error"
