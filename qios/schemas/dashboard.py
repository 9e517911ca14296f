from datetime import datetime
from typing import List, Optional

from qios.schemas.common import CamelModel, Money


class RecentOrder(CamelModel):
    id: str
    order_number: str
    customer: Optional[str] = None
    total: Money
    status: str
    created_at: Optional[datetime] = None


class OrderStatusBreakdown(CamelModel):
    pending: int = 0
    processing: int = 0
    completed: int = 0
    cancelled: int = 0


class DashboardSummary(CamelModel):
    revenue: Money
    orders: int
    customers: int
    low_stock_items: int
    recent_orders: List[RecentOrder]
    order_status: OrderStatusBreakdown


class LowStockProduct(CamelModel):
    id: str
    name: str
    sku: str
    stock_quantity: int
    min_stock_level: int


class LowStockAlert(CamelModel):
    count: int
    products: List[LowStockProduct]


class Metrics(CamelModel):
    total_revenue: Money
    total_orders: int
    pending_orders: int
    active_customers: int
    low_stock_alert: LowStockAlert


class TransactionItem(CamelModel):
    product: str
    quantity: int
    price: Money
    subtotal: Money


class RecentTransaction(CamelModel):
    id: str
    order_number: str
    customer: Optional[str] = None
    customer_segment: Optional[str] = None
    total: Money
    date: Optional[datetime] = None
    status: str
    payment_status: str
    items: List[TransactionItem]


class DashboardMetrics(CamelModel):
    status: str = "success"
    metrics: Metrics
    recent_transactions: List[RecentTransaction]


class ChartPoint(CamelModel):
    date: str
    value: float


class ChartData(CamelModel):
    sales: List[ChartPoint]
    activity: List[ChartPoint]
