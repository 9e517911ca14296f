from typing import List, Optional

from pydantic import Field

from qios.schemas.common import CamelModel


class SalesPoint(CamelModel):
    date: str
    amount: float = 0
    items: int = 0
    customer_count: int = 0


class InventoryPoint(CamelModel):
    product_id: str = ""
    name: str
    stock: float = 0
    price: float = 0
    category: Optional[str] = None


class ExpensePoint(CamelModel):
    date: str
    amount: float = 0
    category: str = ""
    description: Optional[str] = None


class CustomerPoint(CamelModel):
    id: str = ""
    name: str = ""
    email: Optional[str] = ""
    total_spent: float = 0
    last_purchase: Optional[str] = ""
    frequency: int = 0


class Period(CamelModel):
    start: str
    end: str


class BusinessData(CamelModel):
    sales: List[SalesPoint] = []
    inventory: List[InventoryPoint] = []
    expenses: List[ExpensePoint] = []
    customers: List[CustomerPoint] = []
    period: Optional[Period] = None


class AnalyticsRequest(CamelModel):
    business_data: BusinessData


class Insight(CamelModel):
    type: str
    title: str
    description: str = ""
    impact: str = "medium"
    actionable: bool = True
    action: Optional[str] = None
    confidence: float = Field(default=0.8, ge=0, le=1)


class StockAlert(CamelModel):
    product_id: str
    name: str
    current_stock: float
    recommended_stock: float
    urgency: str


class InventoryInsights(CamelModel):
    stock_alerts: List[StockAlert] = []
    recommendations: List[str] = []


class Cashflow(CamelModel):
    inflow: float
    outflow: float
    net: float
    trend: str


class CashflowAnalysis(CamelModel):
    cashflow: Cashflow
    sales_trend: str
    expense_trend: str
    recommendations: List[str] = []
    risks: List[str] = []
