"""Zero-valued view models for views whose data is empty or not yet loaded."""
from freightdesk.schemas.dashboard import (
    DashboardMetrics,
    InvoiceChartData,
    InvoiceMetrics,
    OverallMetrics,
    TruckMetrics,
    VendorMetrics,
)
from freightdesk.schemas.vendor import GeographyBreakdown


def empty_invoice_metrics() -> InvoiceMetrics:
    return InvoiceMetrics(
        total_count=0,
        total_amount=0.0,
        need_action_count=0,
        need_action_amount=0.0,
        escalated_count=0,
        escalated_amount=0.0,
        avg_amount=0.0,
        recent_count=0,
        percent_change=0.0,
        trend="up",
    )


def empty_truck_metrics() -> TruckMetrics:
    return TruckMetrics(total_count=0, make_count=0, body_type_count=0, new_count=0, percent_new=0.0)


def empty_vendor_metrics() -> VendorMetrics:
    return VendorMetrics(total_count=0, state_count=0, city_count=0, new_count=0, percent_new=0.0)


def empty_overall_metrics() -> OverallMetrics:
    return OverallMetrics(
        avg_invoices_per_vendor=0.0,
        avg_invoices_per_truck=0.0,
        avg_amount_per_vendor=0.0,
        avg_amount_per_truck=0.0,
    )


def empty_dashboard_metrics() -> DashboardMetrics:
    return DashboardMetrics(
        invoices=empty_invoice_metrics(),
        trucks=empty_truck_metrics(),
        vendors=empty_vendor_metrics(),
        overall=empty_overall_metrics(),
    )


def empty_chart_data() -> InvoiceChartData:
    return InvoiceChartData(by_status=[], by_month=[], by_truck=[], by_vendor=[])


def empty_geography() -> GeographyBreakdown:
    return GeographyBreakdown(by_state=[], by_city=[])
