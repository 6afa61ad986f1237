"""Invoice metrics aggregation for the dashboard charts.

Every function here is pure: it folds the given record lists into fresh
summary objects and never mutates its inputs. Rankings use Python's stable
`sorted`, so entries with equal amounts keep the order in which their key was
first seen in the input; that makes the top-N cut-off deterministic.
"""
import logging
import uuid
from collections.abc import Iterable, Sequence

from freightdesk.core.config import settings
from freightdesk.schemas.dashboard import (
    DashboardChartData,
    InvoiceChartData,
    LabelledBar,
    MonthBucket,
    StatusBucket,
    TruckBucket,
    VendorBucket,
)
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.schemas.truck import TruckRecord, TruckStatistics
from freightdesk.schemas.vendor import GeoBucket, GeographyBreakdown, VendorRecord, VendorStatistics
from freightdesk.services.status import STATUS_ORDER, is_canonical
from freightdesk.services.view_models import empty_chart_data, empty_geography

logger = logging.getLogger(__name__)


def _top_n() -> int:
    return settings.CHART_TOP_N


def month_key(invoice: InvoiceRecord) -> str:
    """YYYY-MM of the issue date, falling back to the creation time."""
    return invoice.effective_date.strftime("%Y-%m")


# ─── Status ───

def group_by_status(invoices: Sequence[InvoiceRecord]) -> list[StatusBucket]:
    """Count and sum invoices per canonical status, in STATUS_ORDER.

    Invoices with a status outside the canonical set are left out and logged
    as a data-quality problem.
    """
    if not invoices:
        return []

    acc: dict[str, dict] = {s.value: {"count": 0, "amount": 0.0} for s in STATUS_ORDER}
    skipped = 0
    for inv in invoices:
        bucket = acc.get(inv.status)
        if bucket is None:
            skipped += 1
            logger.warning(
                "group_by_status: invoice %s has non-canonical status %r, excluded",
                inv.invoice_eid, inv.status,
            )
            continue
        bucket["count"] += 1
        bucket["amount"] += inv.total_amount

    if skipped:
        logger.info("group_by_status: excluded %d of %d invoices", skipped, len(invoices))

    return [StatusBucket(status=status, **values) for status, values in acc.items()]


# ─── Month ───

def group_by_month(invoices: Sequence[InvoiceRecord]) -> list[MonthBucket]:
    """Count, amount and per-status counts per YYYY-MM, ascending."""
    acc: dict[str, dict] = {}
    for inv in invoices:
        key = month_key(inv)
        bucket = acc.get(key)
        if bucket is None:
            bucket = acc[key] = {
                "count": 0,
                "amount": 0.0,
                "by_status": {s.value: 0 for s in STATUS_ORDER},
            }
        bucket["count"] += 1
        bucket["amount"] += inv.total_amount
        if is_canonical(inv.status):
            bucket["by_status"][inv.status] += 1

    return [MonthBucket(month=key, **acc[key]) for key in sorted(acc)]


# ─── Truck / vendor ───

def _rank_by_amount(acc: dict[uuid.UUID, dict], limit: int) -> list[tuple[uuid.UUID, dict]]:
    ranked = sorted(acc.items(), key=lambda kv: kv[1]["amount"], reverse=True)
    return ranked[:limit]


def _sum_by(invoices: Iterable[InvoiceRecord], attr: str) -> dict[uuid.UUID, dict]:
    acc: dict[uuid.UUID, dict] = {}
    for inv in invoices:
        key = getattr(inv, attr)
        bucket = acc.setdefault(key, {"count": 0, "amount": 0.0})
        bucket["count"] += 1
        bucket["amount"] += inv.total_amount
    return acc


def group_by_truck(invoices: Sequence[InvoiceRecord], limit: int | None = None) -> list[TruckBucket]:
    ranked = _rank_by_amount(_sum_by(invoices, "truck_id"), limit if limit is not None else _top_n())
    return [TruckBucket(truck_id=key, **values) for key, values in ranked]


def group_by_vendor(invoices: Sequence[InvoiceRecord], limit: int | None = None) -> list[VendorBucket]:
    ranked = _rank_by_amount(_sum_by(invoices, "vendor_id"), limit if limit is not None else _top_n())
    return [VendorBucket(vendor_id=key, **values) for key, values in ranked]


def get_invoice_chart_data(invoices: Sequence[InvoiceRecord]) -> InvoiceChartData:
    """All four chart groupings; every list is empty for empty input."""
    if not invoices:
        return empty_chart_data()
    return InvoiceChartData(
        by_status=group_by_status(invoices),
        by_month=group_by_month(invoices),
        by_truck=group_by_truck(invoices),
        by_vendor=group_by_vendor(invoices),
    )


# ─── Per-entity statistics ───

def truck_statistics(
    trucks: Sequence[TruckRecord],
    invoices: Sequence[InvoiceRecord],
) -> list[TruckStatistics]:
    """Invoice count, spend and average per truck, highest spend first."""
    acc = _sum_by(invoices, "truck_id")
    stats = []
    for truck in trucks:
        values = acc.get(truck.id, {"count": 0, "amount": 0.0})
        count, amount = values["count"], values["amount"]
        stats.append(TruckStatistics(
            truck_id=truck.id,
            truck_eid=truck.truck_eid,
            make=truck.make,
            model=truck.model,
            invoice_count=count,
            total_spend=amount,
            avg_invoice_amount=amount / count if count > 0 else 0.0,
        ))
    return sorted(stats, key=lambda s: s.total_spend, reverse=True)


def vendor_statistics(
    vendors: Sequence[VendorRecord],
    invoices: Sequence[InvoiceRecord],
) -> list[VendorStatistics]:
    """Invoice count, spend and average per vendor, highest spend first."""
    acc = _sum_by(invoices, "vendor_id")
    stats = []
    for vendor in vendors:
        values = acc.get(vendor.id, {"count": 0, "amount": 0.0})
        count, amount = values["count"], values["amount"]
        stats.append(VendorStatistics(
            vendor_id=vendor.id,
            vendor_eid=vendor.vendor_eid,
            name=vendor.name,
            state=vendor.state,
            city=vendor.city,
            invoice_count=count,
            total_spend=amount,
            avg_invoice_amount=amount / count if count > 0 else 0.0,
        ))
    return sorted(stats, key=lambda s: s.total_spend, reverse=True)


# ─── Geography ───

def group_by_geography(
    vendor_stats: Sequence[VendorStatistics],
    limit: int | None = None,
) -> GeographyBreakdown:
    """Fold vendor statistics into per-state and per-city spend summaries."""
    if not vendor_stats:
        return empty_geography()

    limit = limit if limit is not None else _top_n()
    states: dict[str, GeoBucket] = {}
    cities: dict[str, GeoBucket] = {}

    for vs in vendor_stats:
        city_key = f"{vs.city}, {vs.state}"
        for acc, key in ((states, vs.state), (cities, city_key)):
            bucket = acc.get(key)
            if bucket is None:
                bucket = acc[key] = GeoBucket(name=key, state=vs.state)
            bucket.vendor_count += 1
            bucket.invoice_count += vs.invoice_count
            bucket.total_spend += vs.total_spend

    def _top(acc: dict[str, GeoBucket]) -> list[GeoBucket]:
        return sorted(acc.values(), key=lambda b: b.total_spend, reverse=True)[:limit]

    return GeographyBreakdown(by_state=_top(states), by_city=_top(cities))


# ─── Chart labels ───

def label_truck_bars(buckets: Sequence[TruckBucket], trucks: Sequence[TruckRecord]) -> list[LabelledBar]:
    names = {t.id: t.display_name for t in trucks}
    return [
        LabelledBar(
            id=b.truck_id,
            name=names.get(b.truck_id) or f"Truck {str(b.truck_id)[-6:]}",
            amount=b.amount,
            count=b.count,
        )
        for b in buckets
    ]


def label_vendor_bars(buckets: Sequence[VendorBucket], vendors: Sequence[VendorRecord]) -> list[LabelledBar]:
    names = {v.id: v.name for v in vendors}
    return [
        LabelledBar(
            id=b.vendor_id,
            name=names.get(b.vendor_id) or f"Vendor {str(b.vendor_id)[-6:]}",
            amount=b.amount,
            count=b.count,
        )
        for b in buckets
    ]


def dashboard_chart_data(
    invoices: Sequence[InvoiceRecord],
    trucks: Sequence[TruckRecord],
    vendors: Sequence[VendorRecord],
) -> DashboardChartData:
    """Chart groupings plus the truck and vendor bars with resolved names."""
    chart = get_invoice_chart_data(invoices)
    return DashboardChartData(
        chart_data=chart,
        truck_bars=label_truck_bars(chart.by_truck, trucks),
        vendor_bars=label_vendor_bars(chart.by_vendor, vendors),
    )
