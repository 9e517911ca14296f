from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.crud import product as product_crud
from qios.db import get_db
from qios.schemas.product import ProductCreate, ProductList, ProductRead, RecipeCreate, RecipeRead
from qios.utils.store import resolve_store_id

router = APIRouter(tags=["products"])


# 📋 List products (optional category + name/SKU search)
@router.get("", response_model=ProductList)
async def list_products(
    store_id: Optional[str] = Query(None, alias="storeId"),
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    store_id = resolve_store_id(store_id)
    products = await product_crud.get_products(db, store_id, category=category, search=search)
    return {"products": products}


# ➕ Create product
@router.post("", response_model=ProductRead, status_code=201)
async def create_product(product: ProductCreate, db: AsyncSession = Depends(get_db)):
    store_id = resolve_store_id(product.store_id)
    return await product_crud.create_product(db, product, store_id)


# 🧾 Attach a raw material to the product's recipe
@router.post("/{product_id}/recipes", response_model=RecipeRead, status_code=201)
async def add_recipe(
    product_id: str,
    recipe: RecipeCreate,
    store_id: Optional[str] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    product = await product_crud.get_product(db, product_id, resolve_store_id(store_id))
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return await product_crud.add_recipe(db, product, recipe)
