"""Dashboard API endpoints: KPI cards and chart data."""
import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from freightdesk.core.deps import FeedDep, StoreDep
from freightdesk.schemas.dashboard import DashboardChartData, DashboardMetrics
from freightdesk.services.kpi import dashboard_metrics
from freightdesk.services.metrics import dashboard_chart_data

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/metrics", response_model=DashboardMetrics, summary="Invoice, truck, vendor and overall KPIs")
async def get_dashboard_metrics(store: StoreDep, feed: FeedDep):
    if feed is not None and feed.loaded:
        return feed.metrics
    invoices, trucks, vendors = await asyncio.gather(
        store.list_invoices(), store.list_trucks(), store.list_vendors()
    )
    return dashboard_metrics(invoices, trucks, vendors, now=datetime.now(timezone.utc))


@router.get("/chart-data", response_model=DashboardChartData, summary="Chart groupings with labelled bars")
async def get_dashboard_chart_data(store: StoreDep, feed: FeedDep):
    if feed is not None and feed.loaded:
        return feed.chart
    invoices, trucks, vendors = await asyncio.gather(
        store.list_invoices(), store.list_trucks(), store.list_vendors()
    )
    return dashboard_chart_data(invoices, trucks, vendors)
