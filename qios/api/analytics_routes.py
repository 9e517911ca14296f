from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.db import get_db
from qios.schemas.analytics import AnalyticsRequest, BusinessData, CashflowAnalysis, Insight, InventoryInsights
from qios.schemas.common import DataEnvelope
from qios.services.analytics import AIAnalytics, build_business_data, get_ai_client
from qios.utils.store import resolve_store_id

router = APIRouter(tags=["analytics"])


def get_analytics(client=Depends(get_ai_client)) -> AIAnalytics:
    return AIAnalytics(client)


@router.get("/business-data", response_model=DataEnvelope[BusinessData])
async def business_data(
    store_id: Optional[str] = Query(None, alias="storeId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    data = await build_business_data(db, resolve_store_id(store_id), start_date, end_date)
    return {"success": True, "data": data}


@router.post("/insights", response_model=DataEnvelope[List[Insight]])
async def insights(payload: AnalyticsRequest, analytics: AIAnalytics = Depends(get_analytics)):
    return {"success": True, "data": await analytics.generate_insights(payload.business_data)}


@router.post("/inventory", response_model=DataEnvelope[InventoryInsights])
async def inventory(payload: AnalyticsRequest, analytics: AIAnalytics = Depends(get_analytics)):
    return {"success": True, "data": await analytics.generate_inventory_insights(payload.business_data)}


@router.post("/cashflow", response_model=DataEnvelope[CashflowAnalysis])
async def cashflow(payload: AnalyticsRequest, analytics: AIAnalytics = Depends(get_analytics)):
    return {"success": True, "data": await analytics.generate_cashflow_analysis(payload.business_data)}


# 🤖 Tagged-section reports share one handler shape
def _tagged_report(kind: str):
    async def handler(payload: AnalyticsRequest, analytics: AIAnalytics = Depends(get_analytics)):
        return {"success": True, "data": await analytics.generate_report(kind, payload.business_data)}

    handler.__name__ = f"{kind}_report"
    return handler


for _kind in ("growth", "monthly", "risks", "trends"):
    router.add_api_route(
        f"/{_kind}",
        _tagged_report(_kind),
        methods=["POST"],
        response_model=DataEnvelope[List[Insight]],
    )
