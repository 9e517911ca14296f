"""Development-only helpers for the testing console. 403 outside ENVIRONMENT=development."""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from qios.core.config import settings
from qios.core.constants import DEV_STORE_ID, OrderStatus, PaymentStatus
from qios.crud import product as product_crud
from qios.crud.store import get_or_create_store
from qios.db import get_db
from qios.schemas.common import CamelModel
from qios.schemas.order import OrderCreate, OrderLineIn, OrderRef
from qios.schemas.product import ProductWithRecipes
from qios.schemas.store import StoreRead
from qios.services import orders as order_service
from qios.services.dev_tools import reset_all
from qios.services.inventory import restore_initial_supply

log = logging.getLogger(__name__)


def require_development():
    if not settings.is_development:
        raise HTTPException(status_code=403, detail="Not available")


router = APIRouter(tags=["dev"], dependencies=[Depends(require_development)])


class DevTransaction(CamelModel):
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    items: List[OrderLineIn] = Field(min_length=1)
    payment_method: Optional[str] = None
    transaction_date: Optional[datetime] = None


def dev_store_id() -> str:
    return settings.default_store_id or DEV_STORE_ID


@router.post("/ensure-store")
async def ensure_store(db: AsyncSession = Depends(get_db)):
    store = await get_or_create_store(
        db,
        DEV_STORE_ID,
        name="Coffee Shop - Dev Testing",
        address="Jakarta, Indonesia",
        phone="08123456789",
        email="dev@qios.test",
    )
    return {
        "success": True,
        "store": StoreRead.model_validate(store).model_dump(mode="json", by_alias=True),
        "message": "Store ready",
    }


@router.get("/products")
async def products(db: AsyncSession = Depends(get_db)):
    items = await product_crud.get_products_with_recipes(db)
    payload = [ProductWithRecipes.model_validate(p).model_dump(mode="json", by_alias=True) for p in items]
    return {"products": payload, "count": len(payload)}


@router.post("/create-transaction", status_code=201)
async def create_transaction(payload: DevTransaction, db: AsyncSession = Depends(get_db)):
    order = await order_service.create_order(
        db,
        dev_store_id(),
        OrderCreate(
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            items=payload.items,
            payment_method=payload.payment_method or "QRIS",
            status=OrderStatus.COMPLETED,
            payment_status=PaymentStatus.PENDING,
            transaction_date=payload.transaction_date,
        ),
    )
    return {"success": True, "orderNumber": order.order_number, "orderId": order.id}


@router.get("/pending-orders")
async def pending_orders(db: AsyncSession = Depends(get_db)):
    orders = await order_service.pending_orders(db)
    return {
        "orders": [
            {
                "id": o.id,
                "orderNumber": o.order_number,
                "customerName": o.customer.name if o.customer else None,
                "total": float(o.total),
                "createdAt": o.created_at.isoformat() if o.created_at else None,
            }
            for o in orders
        ]
    }


# 💸 "Tarik dana": mark the order as paid
@router.post("/tarik-dana")
async def tarik_dana(payload: OrderRef, db: AsyncSession = Depends(get_db)):
    order = await order_service.confirm_payment(db, payload.order_id)
    return {"success": True, "orderNumber": order.order_number}


@router.post("/cancel-order")
async def cancel_order(payload: OrderRef, db: AsyncSession = Depends(get_db)):
    await order_service.cancel_order(db, payload.order_id)
    return {"success": True}


@router.post("/generate-supply")
async def generate_supply(db: AsyncSession = Depends(get_db)):
    details = await restore_initial_supply(db)
    return {"success": True, "summary": {"itemsReset": len(details), "details": details}}


@router.post("/reset-all")
async def reset(db: AsyncSession = Depends(get_db)):
    counts = await reset_all(db)
    return {"success": True, "summary": counts}
