from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from qios.core.constants import OrderStatus, PaymentStatus
from qios.schemas.order import OrderCreate, OrderLineIn
from qios.services import dashboard as dashboard_service
from qios.services import orders as order_service
from qios.utils.time_windows import current_month, day_range, end_of_day, parse_day

from conftest import STORE_ID


async def place(session, shop, phone, quantity=1, **extra):
    return await order_service.create_order(
        session,
        STORE_ID,
        OrderCreate(
            customer_name=f"Customer {phone}",
            customer_phone=phone,
            items=[OrderLineIn(product_id=shop["roti"].id, quantity=quantity)],
            **extra,
        ),
    )


@pytest.mark.asyncio
async def test_summary_counts_paid_completed_revenue(session, shop):
    await place(session, shop, "081", status=OrderStatus.COMPLETED, payment_status=PaymentStatus.PAID)
    await place(session, shop, "082", status=OrderStatus.COMPLETED)
    await place(session, shop, "083")

    summary = await dashboard_service.dashboard_summary(session, STORE_ID)

    assert summary.revenue == Decimal("16650")
    assert summary.orders == 3
    assert summary.customers == 3
    assert summary.order_status.completed == 2
    assert summary.order_status.pending == 1
    assert len(summary.recent_orders) == 3


@pytest.mark.asyncio
async def test_metrics_default_to_current_month(session, shop):
    await place(session, shop, "081", status=OrderStatus.COMPLETED, transaction_date=datetime.now())
    await place(session, shop, "081", status=OrderStatus.PROCESSING, transaction_date=datetime.now())

    last_year = datetime.now() - timedelta(days=400)
    await place(session, shop, "082", status=OrderStatus.COMPLETED, transaction_date=last_year)

    result = await dashboard_service.dashboard_metrics(session, STORE_ID)
    metrics = result.metrics

    assert metrics.total_revenue == Decimal("16650")
    assert metrics.total_orders == 2
    assert metrics.pending_orders == 1
    assert metrics.active_customers == 1
    assert len(result.recent_transactions) == 1
    assert result.recent_transactions[0].items[0].product == "Roti"


@pytest.mark.asyncio
async def test_metrics_end_date_is_inclusive(session, shop):
    late = datetime.combine(date(2026, 3, 31), datetime.min.time()) + timedelta(hours=23, minutes=59)
    await place(session, shop, "081", status=OrderStatus.COMPLETED, transaction_date=late)

    result = await dashboard_service.dashboard_metrics(session, STORE_ID, "2026-03-01", "2026-03-31")
    assert result.metrics.total_orders == 1

    result = await dashboard_service.dashboard_metrics(session, STORE_ID, "2026-03-01", "2026-03-30")
    assert result.metrics.total_orders == 0


@pytest.mark.asyncio
async def test_charts_group_by_day(client, session, shop):
    day = datetime(2026, 2, 10, 9, 0)
    await place(session, shop, "081", status=OrderStatus.COMPLETED, transaction_date=day)
    await place(session, shop, "082", status=OrderStatus.COMPLETED, transaction_date=day + timedelta(hours=3))
    await place(session, shop, "081", status=OrderStatus.COMPLETED, transaction_date=day + timedelta(days=1))
    await place(session, shop, "083", transaction_date=day)

    resp = await client.get(
        "/api/dashboard/charts",
        params={"storeId": STORE_ID, "startDate": "2026-02-01", "endDate": "2026-02-28"},
    )
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["sales"] == [
        {"date": "2026-02-10", "value": 33300},
        {"date": "2026-02-11", "value": 16650},
    ]
    assert body["data"]["activity"] == [
        {"date": "2026-02-10", "value": 2},
        {"date": "2026-02-11", "value": 1},
    ]


@pytest.mark.asyncio
async def test_dashboard_endpoint_shape(client, shop):
    resp = await client.get("/api/dashboard", params={"storeId": STORE_ID})
    body = resp.json()
    assert body["revenue"] == 0
    assert body["orderStatus"] == {"pending": 0, "processing": 0, "completed": 0, "cancelled": 0}
    assert body["lowStockItems"] == 0


def test_day_range_is_inclusive():
    start, end = day_range("2026-03-01", "2026-03-31", None, None)
    assert start == datetime(2026, 3, 1)
    assert end == datetime(2026, 3, 31, 23, 59, 59, 999000)
    assert end_of_day(date(2026, 3, 31)) == end


def test_parse_day_accepts_timestamps_and_blanks():
    assert parse_day("2026-03-05T10:00:00Z") == date(2026, 3, 5)
    assert parse_day("  ") is None
    assert parse_day("not a date") is None


def test_current_month_bounds():
    assert current_month(date(2026, 2, 14)) == (date(2026, 2, 1), date(2026, 2, 28))
    assert current_month(date(2026, 12, 3)) == (date(2026, 12, 1), date(2026, 12, 31))
