"""
AI Analytics Service

Builds a prompt per report kind from a BusinessData snapshot, asks Gemini,
and turns the reply into structured insights.
"""
import logging
from typing import List

from fastapi import HTTPException

from qios.schemas.analytics import (
    BusinessData,
    Cashflow,
    CashflowAnalysis,
    Insight,
    InventoryInsights,
    StockAlert,
)
from qios.services.analytics import parsers, prompts

log = logging.getLogger(__name__)

TAGGED_REPORTS = {
    "growth": prompts.growth_prompt,
    "monthly": prompts.monthly_prompt,
    "risks": prompts.risks_prompt,
    "trends": prompts.trends_prompt,
}


def stock_alerts(data: BusinessData) -> List[StockAlert]:
    return [
        StockAlert(
            product_id=item.product_id,
            name=item.name,
            current_stock=item.stock,
            recommended_stock=max(item.stock * 2, 20),
            urgency="high" if item.stock < 5 else "medium",
        )
        for item in prompts.low_stock_items(data)
    ]


class AIAnalytics:
    """Report generator bound to one LLM client (anything with `async generate(prompt)`)."""

    def __init__(self, client):
        self.client = client

    async def _ask(self, kind: str, prompt: str) -> str:
        try:
            text = await self.client.generate(prompt)
        except Exception:
            log.exception("ai_report failed: kind=%s", kind)
            raise HTTPException(status_code=500, detail="Internal server error")
        log.info("ai_report: kind=%s reply_chars=%s", kind, len(text))
        return text

    async def generate_insights(self, data: BusinessData) -> List[Insight]:
        text = await self._ask("insights", prompts.insights_prompt(data))
        return parsers.parse_numbered_insights(text)

    async def generate_report(self, kind: str, data: BusinessData) -> List[Insight]:
        if kind not in TAGGED_REPORTS:
            raise ValueError(f"Unknown report kind: {kind}")
        text = await self._ask(kind, TAGGED_REPORTS[kind](data))
        return parsers.parse_tagged_sections(text, kind)

    async def generate_inventory_insights(self, data: BusinessData) -> InventoryInsights:
        text = await self._ask("inventory", prompts.inventory_prompt(data))
        return InventoryInsights(
            stock_alerts=stock_alerts(data),
            recommendations=parsers.extract_recommendations(text),
        )

    async def generate_cashflow_analysis(self, data: BusinessData) -> CashflowAnalysis:
        inflow = prompts.total_sales(data)
        outflow = prompts.total_expenses(data)
        net = inflow - outflow
        sales_trend = parsers.calculate_trend([s.amount for s in data.sales])
        expense_trend = parsers.calculate_trend([e.amount for e in data.expenses])

        text = await self._ask("cashflow", prompts.cashflow_prompt(data, sales_trend, expense_trend))
        return CashflowAnalysis(
            cashflow=Cashflow(
                inflow=inflow,
                outflow=outflow,
                net=net,
                trend="positive" if net > 0 else "negative" if net < 0 else "stable",
            ),
            sales_trend=sales_trend,
            expense_trend=expense_trend,
            recommendations=parsers.extract_recommendations(text),
            risks=parsers.extract_risks(text),
        )
