from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from qios.core.constants import StockStatus
from qios.schemas.common import CamelModel, Money, Quantity, StoreScoped
from qios.schemas.product import ProductRead


class RawMaterialCreate(StoreScoped):
    name: str = Field(min_length=1)
    unit: str = "pcs"
    stock: Decimal = Field(default=Decimal("0"), ge=0)
    initial_stock: Optional[Decimal] = Field(default=None, ge=0)
    min_stock_level: Decimal = Field(default=Decimal("0"), ge=0)
    cost: Decimal = Field(default=Decimal("0"), ge=0)


class RawMaterialRead(CamelModel):
    id: str
    store_id: str
    name: str
    unit: str
    stock: Quantity
    initial_stock: Quantity
    min_stock_level: Quantity
    cost: Money
    created_at: Optional[datetime] = None


class InventoryProduct(ProductRead):
    status: StockStatus
    stock_value: Money


class InventoryRawMaterial(RawMaterialRead):
    status: StockStatus
    stock_value: Money


class InventorySummary(CamelModel):
    total_products: int
    total_stock_value: Money
    low_stock_count: int
    out_of_stock_count: int
    products: List[InventoryProduct]
    low_stock_products: List[ProductRead]
    out_of_stock_products: List[ProductRead]
    raw_materials: List[InventoryRawMaterial] = []


class RawMaterialList(CamelModel):
    raw_materials: List[RawMaterialRead]
