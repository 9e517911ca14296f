from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from qios.models.product import Product, Recipe
from qios.models.raw_material import RawMaterial
from qios.schemas.product import ProductCreate, RecipeCreate


async def create_product(db: AsyncSession, product: ProductCreate, store_id: str) -> Product:
    existing = await db.execute(select(Product).where(Product.sku == product.sku))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="SKU already exists")

    new_product = Product(
        store_id=store_id,
        sku=product.sku,
        name=product.name,
        description=product.description,
        category=product.category,
        price=product.price,
        cost=product.cost,
        stock_quantity=product.stock_quantity,
        min_stock_level=product.min_stock_level,
        is_finished_product=product.is_finished_product,
    )
    db.add(new_product)
    await db.commit()
    await db.refresh(new_product)
    return new_product


async def get_products(
    db: AsyncSession,
    store_id: str,
    category: Optional[str] = None,
    search: Optional[str] = None,
):
    query = select(Product).where(Product.store_id == store_id)

    if category:
        query = query.where(Product.category == category)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))

    result = await db.execute(query.order_by(Product.name.asc()))
    return result.scalars().all()


async def get_products_with_recipes(db: AsyncSession, store_id: Optional[str] = None):
    query = select(Product).options(
        selectinload(Product.recipes).selectinload(Recipe.raw_material)
    )
    if store_id:
        query = query.where(Product.store_id == store_id)
    result = await db.execute(query.order_by(Product.name.asc()))
    return result.scalars().all()


async def get_product(db: AsyncSession, product_id: str, store_id: str) -> Optional[Product]:
    result = await db.execute(
        select(Product).where(Product.id == product_id, Product.store_id == store_id)
    )
    return result.scalar_one_or_none()


async def add_recipe(db: AsyncSession, product: Product, recipe: RecipeCreate) -> Recipe:
    """Upsert one recipe line: quantity of a raw material per unit of product."""
    material = await db.get(RawMaterial, recipe.raw_material_id)
    if not material or material.store_id != product.store_id:
        raise HTTPException(status_code=400, detail="Invalid raw material")

    result = await db.execute(
        select(Recipe).where(
            Recipe.product_id == product.id,
            Recipe.raw_material_id == material.id,
        )
    )
    line = result.scalar_one_or_none()
    if line:
        line.quantity = recipe.quantity
    else:
        line = Recipe(product_id=product.id, raw_material_id=material.id, quantity=recipe.quantity)
        db.add(line)

    product.is_finished_product = True
    await db.commit()

    result = await db.execute(
        select(Recipe).where(Recipe.id == line.id).options(selectinload(Recipe.raw_material))
    )
    return result.scalar_one()
