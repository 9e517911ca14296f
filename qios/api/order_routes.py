from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.core.constants import OrderStatus
from qios.db import get_db
from qios.schemas.order import OrderCreate, OrderList, OrderRead
from qios.services import orders as order_service
from qios.utils.store import resolve_store_id

router = APIRouter(tags=["orders"])


@router.get("", response_model=OrderList)
async def list_orders(
    store_id: Optional[str] = Query(None, alias="storeId"),
    status: Optional[OrderStatus] = None,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    orders = await order_service.list_orders(db, resolve_store_id(store_id), status=status, limit=limit)
    return {"orders": orders}


# 🛒 Checkout: order + items + stock + ledgers + customer stats, all or nothing
@router.post("", response_model=OrderRead, status_code=201)
async def create_order(order: OrderCreate, db: AsyncSession = Depends(get_db)):
    store_id = resolve_store_id(order.store_id)
    return await order_service.create_order(db, store_id, order)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: str,
    store_id: Optional[str] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    return await order_service.get_order(db, order_id, resolve_store_id(store_id))


@router.post("/{order_id}/cancel", response_model=OrderRead)
async def cancel_order(
    order_id: str,
    store_id: Optional[str] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    return await order_service.cancel_order(db, order_id, resolve_store_id(store_id))
