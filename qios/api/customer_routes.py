from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.crud import customer as customer_crud
from qios.db import get_db
from qios.schemas.customer import CustomerCreate, CustomerList, CustomerRead
from qios.utils.store import resolve_store_id

router = APIRouter(tags=["customers"])


@router.get("", response_model=CustomerList)
async def list_customers(
    store_id: Optional[str] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    customers = await customer_crud.get_customers(db, resolve_store_id(store_id))
    return {"customers": customers}


@router.post("", response_model=CustomerRead, status_code=201)
async def create_customer(customer: CustomerCreate, db: AsyncSession = Depends(get_db)):
    store_id = resolve_store_id(customer.store_id)
    return await customer_crud.create_customer(db, customer, store_id)
