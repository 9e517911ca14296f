from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from qios.core.constants import CustomerSegment
from qios.schemas.common import CamelModel, Money, StoreScoped


class CustomerCreate(StoreScoped):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: Optional[str] = None
    address: Optional[str] = None
    segment: CustomerSegment = CustomerSegment.REGULAR


class CustomerRead(CamelModel):
    id: str
    store_id: str
    name: str
    email: Optional[str] = None
    phone: str
    address: Optional[str] = None
    segment: CustomerSegment
    total_spent: Money = Decimal("0")
    total_transactions: int = 0
    last_visit: Optional[datetime] = None
    created_at: Optional[datetime] = None


class CustomerList(CamelModel):
    customers: List[CustomerRead]
