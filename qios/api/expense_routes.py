from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.crud import expense as expense_crud
from qios.db import get_db
from qios.schemas.expense import ExpenseCreate, ExpenseList, ExpenseRead
from qios.utils.store import resolve_store_id
from qios.utils.time_windows import parse_day

router = APIRouter(tags=["expenses"])


@router.get("", response_model=ExpenseList)
async def list_expenses(
    store_id: Optional[str] = Query(None, alias="storeId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    expenses = await expense_crud.get_expenses(
        db, resolve_store_id(store_id), start=parse_day(start_date), end=parse_day(end_date)
    )
    return {"expenses": expenses}


@router.post("", response_model=ExpenseRead, status_code=201)
async def create_expense(expense: ExpenseCreate, db: AsyncSession = Depends(get_db)):
    store_id = resolve_store_id(expense.store_id)
    return await expense_crud.create_expense(db, expense, store_id)
