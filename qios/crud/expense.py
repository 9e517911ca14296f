from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from qios.models.expense import Expense
from qios.schemas.expense import ExpenseCreate


async def create_expense(db: AsyncSession, expense: ExpenseCreate, store_id: str) -> Expense:
    new_expense = Expense(
        store_id=store_id,
        date=expense.date,
        amount=expense.amount,
        category=expense.category,
        description=expense.description,
    )
    db.add(new_expense)
    await db.commit()
    await db.refresh(new_expense)
    return new_expense


async def get_expenses(
    db: AsyncSession,
    store_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
):
    query = select(Expense).where(Expense.store_id == store_id)
    if start:
        query = query.where(Expense.date >= start)
    if end:
        query = query.where(Expense.date <= end)

    result = await db.execute(query.order_by(Expense.date.asc()))
    return result.scalars().all()
