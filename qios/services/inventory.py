import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from qios.core.constants import MovementType, StockStatus
from qios.crud.raw_material import get_raw_materials
from qios.models.product import Product
from qios.models.raw_material import RawMaterial, RawMaterialMovement
from qios.schemas.inventory import InventoryProduct, InventoryRawMaterial, InventorySummary
from qios.schemas.product import ProductRead
from qios.utils.money import to_decimal

log = logging.getLogger(__name__)


def stock_status(stock, min_level) -> StockStatus:
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock <= min_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


async def inventory_summary(db: AsyncSession, store_id: str) -> InventorySummary:
    result = await db.execute(
        select(Product).where(Product.store_id == store_id).order_by(Product.name.asc())
    )
    products = result.scalars().all()

    rows = []
    low, out = [], []
    total_value = Decimal("0")
    for p in products:
        status = stock_status(p.stock_quantity, p.min_stock_level)
        value = to_decimal(p.cost) * p.stock_quantity
        total_value += value
        rows.append(InventoryProduct(
            **ProductRead.model_validate(p).model_dump(), status=status, stock_value=value
        ))
        if status == StockStatus.LOW_STOCK:
            low.append(ProductRead.model_validate(p))
        elif status == StockStatus.OUT_OF_STOCK:
            out.append(ProductRead.model_validate(p))

    materials = []
    for m in await get_raw_materials(db, store_id):
        stock = to_decimal(m.stock)
        materials.append(InventoryRawMaterial(
            id=m.id,
            store_id=m.store_id,
            name=m.name,
            unit=m.unit,
            stock=stock,
            initial_stock=to_decimal(m.initial_stock),
            min_stock_level=to_decimal(m.min_stock_level),
            cost=to_decimal(m.cost),
            created_at=m.created_at,
            status=stock_status(stock, to_decimal(m.min_stock_level)),
            stock_value=stock * to_decimal(m.cost),
        ))

    return InventorySummary(
        total_products=len(products),
        total_stock_value=total_value,
        low_stock_count=len(low),
        out_of_stock_count=len(out),
        products=rows,
        low_stock_products=low,
        out_of_stock_products=out,
        raw_materials=materials,
    )


async def restore_initial_supply(db: AsyncSession, store_id: Optional[str] = None) -> List[dict]:
    """Reset every raw material to its initial stock, logging the difference as ADJUSTMENT."""
    query = select(RawMaterial).order_by(RawMaterial.name.asc())
    if store_id:
        query = query.where(RawMaterial.store_id == store_id)
    result = await db.execute(query)

    details = []
    for material in result.scalars().all():
        diff = to_decimal(material.initial_stock) - to_decimal(material.stock)
        if diff != 0:
            material.stock = material.initial_stock
            db.add(RawMaterialMovement(
                raw_material_id=material.id,
                type=MovementType.ADJUSTMENT,
                quantity=diff,
                notes="Reset to initial stock",
            ))
        details.append({"name": material.name, "resetTo": f"{to_decimal(material.initial_stock).normalize():f}{material.unit}"})

    await db.commit()
    log.info("restore_initial_supply: store=%s materials=%s", store_id, len(details))
    return details
