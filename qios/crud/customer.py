from typing import Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from qios.core.constants import CustomerSegment
from qios.models.customer import Customer
from qios.schemas.customer import CustomerCreate


async def create_customer(db: AsyncSession, customer: CustomerCreate, store_id: str) -> Customer:
    existing = await get_customer_by_phone(db, store_id, customer.phone)
    if existing:
        raise HTTPException(status_code=409, detail="Phone number already registered")

    new_customer = Customer(
        store_id=store_id,
        name=customer.name.strip(),
        phone=customer.phone.strip(),
        email=customer.email,
        address=customer.address,
        segment=customer.segment,
    )
    db.add(new_customer)
    await db.commit()
    await db.refresh(new_customer)
    return new_customer


async def get_customers(db: AsyncSession, store_id: str):
    result = await db.execute(
        select(Customer)
        .where(Customer.store_id == store_id)
        .order_by(Customer.created_at.desc())
    )
    return result.scalars().all()


async def get_customer(db: AsyncSession, customer_id: str, store_id: str) -> Optional[Customer]:
    result = await db.execute(
        select(Customer).where(Customer.id == customer_id, Customer.store_id == store_id)
    )
    return result.scalar_one_or_none()


async def get_customer_by_phone(db: AsyncSession, store_id: str, phone: str) -> Optional[Customer]:
    result = await db.execute(
        select(Customer).where(Customer.store_id == store_id, Customer.phone == phone.strip())
    )
    return result.scalar_one_or_none()


async def find_or_create_by_phone(db: AsyncSession, store_id: str, name: str, phone: str) -> Customer:
    """Walk-in flow: reuse the customer with this phone, else register a NEW one. Flushes only."""
    customer = await get_customer_by_phone(db, store_id, phone)
    if customer:
        return customer

    customer = Customer(
        store_id=store_id,
        name=name.strip(),
        phone=phone.strip(),
        segment=CustomerSegment.NEW,
    )
    db.add(customer)
    await db.flush()
    return customer
