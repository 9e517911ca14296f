from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from qios.schemas.common import CamelModel, Money, Quantity, StoreScoped


class ProductCreate(StoreScoped):
    sku: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    cost: Decimal = Field(ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    min_stock_level: int = Field(default=0, ge=0)
    is_finished_product: bool = False


class RawMaterialBrief(CamelModel):
    id: str
    name: str
    unit: str
    stock: Quantity


class RecipeCreate(CamelModel):
    raw_material_id: str
    quantity: Decimal = Field(gt=0)


class RecipeRead(CamelModel):
    id: str
    product_id: str
    raw_material_id: str
    quantity: Quantity
    raw_material: Optional[RawMaterialBrief] = None


class ProductRead(CamelModel):
    id: str
    store_id: str
    sku: str
    name: str
    description: Optional[str] = None
    category: str
    price: Money
    cost: Money
    stock_quantity: int
    min_stock_level: int
    is_finished_product: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductWithRecipes(ProductRead):
    recipes: List[RecipeRead] = []


class ProductList(CamelModel):
    products: List[ProductRead]
