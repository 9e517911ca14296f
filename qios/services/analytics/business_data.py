from collections import OrderedDict
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from qios.core.constants import OrderStatus
from qios.models.customer import Customer
from qios.models.expense import Expense
from qios.models.order import Order
from qios.models.product import Product
from qios.schemas.analytics import (
    BusinessData,
    CustomerPoint,
    ExpensePoint,
    InventoryPoint,
    Period,
    SalesPoint,
)
from qios.utils.time_windows import day_range, last_n_days, parse_day

DEFAULT_WINDOW_DAYS = 30


async def build_business_data(
    db: AsyncSession,
    store_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> BusinessData:
    """Snapshot fed to the AI reports. The window applies only when both ends are given."""
    if parse_day(start_date) and parse_day(end_date):
        start, end = day_range(start_date, end_date, None, None)
    else:
        default_start, default_end = last_n_days(DEFAULT_WINDOW_DAYS)
        start, end = day_range(None, None, default_start, default_end)

    result = await db.execute(
        select(Order)
        .where(
            Order.store_id == store_id,
            Order.status == OrderStatus.COMPLETED,
            Order.transaction_date >= start,
            Order.transaction_date <= end,
        )
        .options(selectinload(Order.items))
        .order_by(Order.transaction_date.asc())
    )
    days = OrderedDict()
    for order in result.scalars().all():
        key = order.transaction_date.date().isoformat()
        day = days.setdefault(key, {"amount": 0.0, "items": 0, "customers": set()})
        day["amount"] += float(order.total)
        day["items"] += len(order.items)
        day["customers"].add(order.customer_id)

    sales = [
        SalesPoint(date=key, amount=d["amount"], items=d["items"], customer_count=len(d["customers"]))
        for key, d in days.items()
    ]

    result = await db.execute(select(Product).where(Product.store_id == store_id))
    inventory = [
        InventoryPoint(
            product_id=p.id,
            name=p.name,
            stock=p.stock_quantity,
            price=float(p.price),
            category=p.category,
        )
        for p in result.scalars().all()
    ]

    result = await db.execute(
        select(Expense)
        .where(
            Expense.store_id == store_id,
            Expense.date >= start.date(),
            Expense.date <= end.date(),
        )
        .order_by(Expense.date.asc())
    )
    expenses = [
        ExpensePoint(
            date=e.date.isoformat(),
            amount=float(e.amount),
            category=e.category,
            description=e.description,
        )
        for e in result.scalars().all()
    ]

    # Lifetime customer stats, not windowed
    result = await db.execute(select(Customer).where(Customer.store_id == store_id))
    customers = [
        CustomerPoint(
            id=c.id,
            name=c.name,
            email=c.email or "",
            total_spent=float(c.total_spent or 0),
            last_purchase=c.last_visit.date().isoformat() if c.last_visit else "",
            frequency=c.total_transactions or 0,
        )
        for c in result.scalars().all()
    ]

    return BusinessData(
        sales=sales,
        inventory=inventory,
        expenses=expenses,
        customers=customers,
        period=Period(start=start.date().isoformat(), end=end.date().isoformat()),
    )
