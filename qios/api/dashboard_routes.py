from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.db import get_db
from qios.schemas.common import DataEnvelope
from qios.schemas.dashboard import ChartData, DashboardMetrics, DashboardSummary
from qios.services import dashboard as dashboard_service
from qios.utils.store import resolve_store_id

router = APIRouter(tags=["dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_dashboard(
    store_id: Optional[str] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard_service.dashboard_summary(db, resolve_store_id(store_id))


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(
    store_id: Optional[str] = Query(None, alias="storeId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard_service.dashboard_metrics(db, resolve_store_id(store_id), start_date, end_date)


@router.get("/charts", response_model=DataEnvelope[ChartData])
async def get_charts(
    store_id: Optional[str] = Query(None, alias="storeId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    data = await dashboard_service.dashboard_charts(db, resolve_store_id(store_id), start_date, end_date)
    return {"success": True, "data": data}
