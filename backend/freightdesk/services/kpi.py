"""Derived KPI calculations for the dashboard cards.

All functions are total: empty input yields the zero-valued view models and
no function divides by zero.
"""
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from freightdesk.core.config import settings
from freightdesk.schemas.dashboard import (
    DashboardMetrics,
    InvoiceMetrics,
    OverallMetrics,
    TruckMetrics,
    VendorMetrics,
)
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.schemas.truck import TruckRecord
from freightdesk.schemas.vendor import VendorRecord
from freightdesk.services.status import InvoiceStatus
from freightdesk.services.view_models import (
    empty_invoice_metrics,
    empty_truck_metrics,
    empty_vendor_metrics,
)

TREND_UP = "up"
TREND_DOWN = "down"


def _safe_utc(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware (UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _window_start(now: datetime | None, window_days: int | None) -> datetime:
    now = _safe_utc(now or datetime.now(timezone.utc))
    return now - timedelta(days=window_days if window_days is not None else settings.RECENT_WINDOW_DAYS)


def average_amount(total: float, count: int) -> float:
    return total / count if count > 0 else 0.0


def percent_change(current: float, baseline: float) -> float:
    """(current - baseline) / baseline * 100, or 0 when either side is 0."""
    if not current or not baseline:
        return 0.0
    return (current - baseline) / baseline * 100


def trend_direction(pct: float) -> str:
    return TREND_UP if pct >= 0 else TREND_DOWN


def recent_invoices(
    invoices: Sequence[InvoiceRecord],
    now: datetime | None = None,
    window_days: int | None = None,
) -> list[InvoiceRecord]:
    cutoff = _window_start(now, window_days)
    return [inv for inv in invoices if _safe_utc(inv.effective_date) > cutoff]


def recent_percent_change(
    invoices: Sequence[InvoiceRecord],
    now: datetime | None = None,
    window_days: int | None = None,
) -> float:
    """Average amount of the recent window relative to the overall average."""
    if not invoices:
        return 0.0
    recent = recent_invoices(invoices, now, window_days)
    overall_avg = average_amount(sum(inv.total_amount for inv in invoices), len(invoices))
    recent_avg = average_amount(sum(inv.total_amount for inv in recent), len(recent))
    return percent_change(recent_avg, overall_avg)


# ─── Section metrics ───

def invoice_metrics(
    invoices: Sequence[InvoiceRecord],
    now: datetime | None = None,
    window_days: int | None = None,
) -> InvoiceMetrics:
    if not invoices:
        return empty_invoice_metrics()

    totals = {s.value: [0, 0.0] for s in InvoiceStatus}
    total_amount = 0.0
    for inv in invoices:
        total_amount += inv.total_amount
        if inv.status in totals:
            totals[inv.status][0] += 1
            totals[inv.status][1] += inv.total_amount

    pct = recent_percent_change(invoices, now, window_days)
    need_action_count, need_action_amount = totals[InvoiceStatus.need_action.value]
    escalated_count, escalated_amount = totals[InvoiceStatus.escalated.value]

    return InvoiceMetrics(
        total_count=len(invoices),
        total_amount=total_amount,
        need_action_count=need_action_count,
        need_action_amount=need_action_amount,
        escalated_count=escalated_count,
        escalated_amount=escalated_amount,
        avg_amount=average_amount(total_amount, len(invoices)),
        recent_count=len(recent_invoices(invoices, now, window_days)),
        percent_change=pct,
        trend=trend_direction(pct),
    )


def truck_metrics(
    trucks: Sequence[TruckRecord],
    now: datetime | None = None,
    window_days: int | None = None,
) -> TruckMetrics:
    if not trucks:
        return empty_truck_metrics()
    cutoff = _window_start(now, window_days)
    new_count = sum(1 for t in trucks if _safe_utc(t.created_at) > cutoff)
    return TruckMetrics(
        total_count=len(trucks),
        make_count=len({t.make for t in trucks}),
        body_type_count=len({t.body_type for t in trucks}),
        new_count=new_count,
        percent_new=new_count / len(trucks) * 100,
    )


def vendor_metrics(
    vendors: Sequence[VendorRecord],
    now: datetime | None = None,
    window_days: int | None = None,
) -> VendorMetrics:
    if not vendors:
        return empty_vendor_metrics()
    cutoff = _window_start(now, window_days)
    new_count = sum(1 for v in vendors if _safe_utc(v.created_at) > cutoff)
    return VendorMetrics(
        total_count=len(vendors),
        state_count=len({v.state for v in vendors}),
        city_count=len({v.city for v in vendors}),
        new_count=new_count,
        percent_new=new_count / len(vendors) * 100,
    )


def overall_metrics(inv: InvoiceMetrics, trucks: TruckMetrics, vendors: VendorMetrics) -> OverallMetrics:
    return OverallMetrics(
        avg_invoices_per_vendor=average_amount(inv.total_count, vendors.total_count),
        avg_invoices_per_truck=average_amount(inv.total_count, trucks.total_count),
        avg_amount_per_vendor=average_amount(inv.total_amount, vendors.total_count),
        avg_amount_per_truck=average_amount(inv.total_amount, trucks.total_count),
    )


def dashboard_metrics(
    invoices: Sequence[InvoiceRecord],
    trucks: Sequence[TruckRecord],
    vendors: Sequence[VendorRecord],
    now: datetime | None = None,
) -> DashboardMetrics:
    inv_m = invoice_metrics(invoices, now)
    truck_m = truck_metrics(trucks, now)
    vendor_m = vendor_metrics(vendors, now)
    return DashboardMetrics(
        invoices=inv_m,
        trucks=truck_m,
        vendors=vendor_m,
        overall=overall_metrics(inv_m, truck_m, vendor_m),
    )
