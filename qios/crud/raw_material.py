from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from qios.models.raw_material import RawMaterial
from qios.schemas.inventory import RawMaterialCreate


async def create_raw_material(db: AsyncSession, material: RawMaterialCreate, store_id: str) -> RawMaterial:
    new_material = RawMaterial(
        store_id=store_id,
        name=material.name.strip(),
        unit=material.unit,
        stock=material.stock,
        # Restock target defaults to the opening stock
        initial_stock=material.initial_stock if material.initial_stock is not None else material.stock,
        min_stock_level=material.min_stock_level,
        cost=material.cost,
    )
    db.add(new_material)
    await db.commit()
    await db.refresh(new_material)
    return new_material


async def get_raw_materials(db: AsyncSession, store_id: str):
    result = await db.execute(
        select(RawMaterial)
        .where(RawMaterial.store_id == store_id)
        .order_by(RawMaterial.name.asc())
    )
    return result.scalars().all()
