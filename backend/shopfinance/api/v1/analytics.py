"""Analytics API routes — period summary, trend, dashboard."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from shopfinance.api.deps import get_now, get_store_client
from shopfinance.config import settings
from shopfinance.schemas.analytics import (
    AnalyticsRequest,
    DashboardResponse,
    DataQuality,
    FinancialSummary,
    SummaryResponse,
    TrendResponse,
)
from shopfinance.services.analytics_service import AnalyticsService
from shopfinance.services.store_client import StoreClient

router = APIRouter()


@router.post("/summary", response_model=SummaryResponse)
async def summary(body: AnalyticsRequest, now: datetime = Depends(get_now)):
    """Revenue, expenses and net balance for one period.

    ``expenses`` includes the standing inventory valuation;
    ``operating_expenses`` excludes it.
    """
    service = AnalyticsService(body.snapshot(), settings.tz)
    view = service.summary(body.period, body.now or now, body.custom_range)
    return SummaryResponse(
        summary=FinancialSummary.from_view(view),
        data_quality=DataQuality.from_report(service.report),
    )


@router.post("/trend", response_model=TrendResponse)
async def trend(body: AnalyticsRequest, now: datetime = Depends(get_now)):
    """Current vs previous period revenue per time bucket.

    Not available for the all-time period (400).
    """
    service = AnalyticsService(body.snapshot(), settings.tz)
    return TrendResponse.from_series(service.trend(body.period, body.now or now, body.custom_range))


@router.post("/dashboard", response_model=DashboardResponse)
async def dashboard(body: AnalyticsRequest, now: datetime = Depends(get_now)):
    """Summary, comparison, breakdowns and trend in one response."""
    service = AnalyticsService(body.snapshot(), settings.tz)
    return DashboardResponse.from_dashboard(
        service.dashboard(body.period, body.now or now, body.custom_range)
    )


@router.get("/companies/{company_id}/dashboard", response_model=DashboardResponse)
async def company_dashboard(
    company_id: int,
    period: str = Query("all-time"),
    start: date | None = None,
    end: date | None = None,
    now: datetime = Depends(get_now),
    store: StoreClient = Depends(get_store_client),
):
    """Fetch a company's data from the storefront backend and build its dashboard."""
    snapshot = await store.fetch_snapshot(company_id)
    service = AnalyticsService(snapshot, settings.tz)
    return DashboardResponse.from_dashboard(service.dashboard(period, now, (start, end)))
