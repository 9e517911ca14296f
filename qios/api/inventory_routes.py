from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.crud import raw_material as raw_material_crud
from qios.db import get_db
from qios.schemas.inventory import InventorySummary, RawMaterialCreate, RawMaterialList, RawMaterialRead
from qios.services.inventory import inventory_summary
from qios.utils.store import resolve_store_id

router = APIRouter(tags=["inventory"])


# 📦 Stock overview with per-product status and value
@router.get("", response_model=InventorySummary)
async def get_inventory(
    store_id: Optional[str] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    return await inventory_summary(db, resolve_store_id(store_id))


@router.get("/raw-materials", response_model=RawMaterialList)
async def list_raw_materials(
    store_id: Optional[str] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    materials = await raw_material_crud.get_raw_materials(db, resolve_store_id(store_id))
    return {"raw_materials": materials}


@router.post("/raw-materials", response_model=RawMaterialRead, status_code=201)
async def create_raw_material(material: RawMaterialCreate, db: AsyncSession = Depends(get_db)):
    store_id = resolve_store_id(material.store_id)
    return await raw_material_crud.create_raw_material(db, material, store_id)
