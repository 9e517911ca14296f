from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import distinct, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from qios.core.constants import OrderStatus, PaymentStatus
from qios.models.customer import Customer
from qios.models.order import Order, OrderItem
from qios.models.product import Product
from qios.schemas.dashboard import (
    ChartData,
    ChartPoint,
    DashboardMetrics,
    DashboardSummary,
    LowStockAlert,
    LowStockProduct,
    Metrics,
    OrderStatusBreakdown,
    RecentOrder,
    RecentTransaction,
    TransactionItem,
)
from qios.utils.money import to_decimal
from qios.utils.time_windows import current_month, day_range


async def _low_stock_products(db: AsyncSession, store_id: str):
    result = await db.execute(
        select(Product)
        .where(Product.store_id == store_id, Product.stock_quantity <= Product.min_stock_level)
        .order_by(Product.stock_quantity.asc())
    )
    return result.scalars().all()


async def dashboard_summary(db: AsyncSession, store_id: str) -> DashboardSummary:
    revenue = await db.scalar(
        select(func.coalesce(func.sum(Order.total), 0)).where(
            Order.store_id == store_id,
            Order.status == OrderStatus.COMPLETED,
            Order.payment_status == PaymentStatus.PAID,
        )
    )
    total_orders = await db.scalar(select(func.count(Order.id)).where(Order.store_id == store_id))
    customers = await db.scalar(select(func.count(Customer.id)).where(Customer.store_id == store_id))
    low_stock = await _low_stock_products(db, store_id)

    result = await db.execute(
        select(Order)
        .where(Order.store_id == store_id)
        .options(selectinload(Order.customer))
        .order_by(Order.created_at.desc())
        .limit(10)
    )
    recent = [
        RecentOrder(
            id=o.id,
            order_number=o.order_number,
            customer=o.customer.name if o.customer else None,
            total=o.total,
            status=o.status.value,
            created_at=o.created_at,
        )
        for o in result.scalars().all()
    ]

    result = await db.execute(
        select(Order.status, func.count(Order.id))
        .where(Order.store_id == store_id)
        .group_by(Order.status)
    )
    counts = {status.value.lower(): n for status, n in result.all()}

    return DashboardSummary(
        revenue=to_decimal(revenue),
        orders=total_orders,
        customers=customers,
        low_stock_items=len(low_stock),
        recent_orders=recent,
        order_status=OrderStatusBreakdown(**counts),
    )


async def dashboard_metrics(
    db: AsyncSession,
    store_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> DashboardMetrics:
    """Metrics over [start 00:00, end 23:59:59.999]; defaults to the current month."""
    month_start, month_end = current_month()
    start, end = day_range(start_date, end_date, month_start, month_end)
    in_range = (
        Order.store_id == store_id,
        Order.transaction_date >= start,
        Order.transaction_date <= end,
    )

    revenue = await db.scalar(
        select(func.coalesce(func.sum(Order.total), 0)).where(
            *in_range, Order.status == OrderStatus.COMPLETED
        )
    )
    total_orders = await db.scalar(select(func.count(Order.id)).where(*in_range))
    pending = await db.scalar(
        select(func.count(Order.id)).where(
            *in_range, Order.status.in_([OrderStatus.PENDING, OrderStatus.PROCESSING])
        )
    )
    active_customers = await db.scalar(
        select(func.count(distinct(Order.customer_id))).where(*in_range)
    )
    low_stock = await _low_stock_products(db, store_id)

    result = await db.execute(
        select(Order)
        .where(*in_range, Order.status == OrderStatus.COMPLETED)
        .options(
            selectinload(Order.customer),
            selectinload(Order.items).selectinload(OrderItem.product),
        )
        .order_by(Order.transaction_date.desc())
        .limit(10)
    )
    transactions = [
        RecentTransaction(
            id=o.id,
            order_number=o.order_number,
            customer=o.customer.name if o.customer else None,
            customer_segment=o.customer.segment.value if o.customer else None,
            total=o.total,
            date=o.transaction_date,
            status=o.status.value,
            payment_status=o.payment_status.value,
            items=[
                TransactionItem(
                    product=item.product.name if item.product else "",
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal,
                )
                for item in o.items
            ],
        )
        for o in result.scalars().all()
    ]

    return DashboardMetrics(
        metrics=Metrics(
            total_revenue=to_decimal(revenue),
            total_orders=total_orders,
            pending_orders=pending,
            active_customers=active_customers,
            low_stock_alert=LowStockAlert(
                count=len(low_stock),
                products=[
                    LowStockProduct(
                        id=p.id,
                        name=p.name,
                        sku=p.sku,
                        stock_quantity=p.stock_quantity,
                        min_stock_level=p.min_stock_level,
                    )
                    for p in low_stock
                ],
            ),
        ),
        recent_transactions=transactions,
    )


async def dashboard_charts(
    db: AsyncSession,
    store_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> ChartData:
    """Daily completed sales and unique customers per day, only for days with sales."""
    today = date.today()
    start, end = day_range(start_date, end_date, today.replace(month=1, day=1), today)

    result = await db.execute(
        select(Order.transaction_date, Order.total, Order.customer_id)
        .where(
            Order.store_id == store_id,
            Order.status == OrderStatus.COMPLETED,
            Order.transaction_date >= start,
            Order.transaction_date <= end,
        )
        .order_by(Order.transaction_date.asc())
    )

    sales = OrderedDict()
    activity = {}
    for when, total, customer_id in result.all():
        key = when.date().isoformat()
        sales[key] = sales.get(key, Decimal("0")) + to_decimal(total)
        activity.setdefault(key, set()).add(customer_id)

    days = sorted(sales)
    return ChartData(
        sales=[ChartPoint(date=d, value=float(sales[d])) for d in days],
        activity=[ChartPoint(date=d, value=len(activity[d])) for d in days],
    )
