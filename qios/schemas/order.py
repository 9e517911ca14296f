from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from qios.core.constants import OrderStatus, PaymentStatus
from qios.schemas.common import CamelModel, Money, StoreScoped


class OrderLineIn(CamelModel):
    product_id: str
    quantity: int = Field(gt=0)


class OrderCreate(StoreScoped):
    user_id: Optional[str] = None
    # Either an existing customer, or name + phone to find-or-create one
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    items: List[OrderLineIn] = Field(min_length=1)
    payment_method: Optional[str] = None
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    notes: Optional[str] = None
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    transaction_date: Optional[datetime] = None


class OrderRef(CamelModel):
    order_id: str


class ProductBrief(CamelModel):
    name: str
    sku: Optional[str] = None


class CustomerBrief(CamelModel):
    name: str
    phone: Optional[str] = None


class OrderItemRead(CamelModel):
    id: str
    product_id: str
    quantity: int
    price: Money
    subtotal: Money
    product: Optional[ProductBrief] = None


class OrderRead(CamelModel):
    id: str
    order_number: str
    store_id: str
    customer_id: str
    user_id: Optional[str] = None
    status: OrderStatus
    payment_method: str
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    notes: Optional[str] = None
    transaction_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    customer: Optional[CustomerBrief] = None
    items: List[OrderItemRead] = []


class OrderList(CamelModel):
    orders: List[OrderRead]
