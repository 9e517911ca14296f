from datetime import date as date_type
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from qios.schemas.common import CamelModel, Money, StoreScoped


class ExpenseCreate(StoreScoped):
    date: date_type
    amount: Decimal = Field(gt=0)
    category: str = Field(min_length=1)
    description: Optional[str] = None


class ExpenseRead(CamelModel):
    id: str
    store_id: str
    date: date_type
    amount: Money
    category: str
    description: Optional[str] = None


class ExpenseList(CamelModel):
    expenses: List[ExpenseRead]
