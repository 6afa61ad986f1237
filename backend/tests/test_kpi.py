"""Unit tests for the derived KPI calculations.

Fleet fixture: invoices of 100 (90 days old), 300 (40d), 200 (10d) and
400 (2d). Overall average 250, 30-day average 300, so the change is +20%.
"""
from freightdesk.services.kpi import (
    average_amount,
    dashboard_metrics,
    invoice_metrics,
    overall_metrics,
    percent_change,
    recent_invoices,
    recent_percent_change,
    trend_direction,
    truck_metrics,
    vendor_metrics,
)
from freightdesk.services.view_models import empty_dashboard_metrics

from conftest import NOW, make_invoice


# ─── Primitives ───────────────────────────────────────────────────────────────

def test_average_amount_zero_count():
    """Zero count yields 0 instead of dividing by zero."""
    assert average_amount(0.0, 0) == 0.0
    assert average_amount(500.0, 4) == 125.0


def test_percent_change_zero_baseline():
    assert percent_change(100.0, 0.0) == 0.0
    assert percent_change(0.0, 100.0) == 0.0
    assert percent_change(150.0, 100.0) == 50.0


def test_trend_direction():
    assert trend_direction(0.0) == "up"
    assert trend_direction(12.5) == "up"
    assert trend_direction(-0.1) == "down"


# ─── Recent window ────────────────────────────────────────────────────────────

def test_recent_invoices_window(fleet):
    recent = recent_invoices(fleet["invoices"], now=NOW, window_days=30)
    assert [i.invoice_eid for i in recent] == ["INV-3", "INV-4"]


def test_recent_invoices_fall_back_to_created_at():
    inv = make_invoice("A", 10.0, days_ago=5, date_issued=None)
    assert recent_invoices([inv], now=NOW) == [inv]


def test_recent_percent_change(fleet):
    pct = recent_percent_change(fleet["invoices"], now=NOW)
    assert round(pct, 6) == 20.0


def test_recent_percent_change_no_recent_invoices():
    """No invoice in the window: recent average is 0, so the change is 0."""
    invoices = [make_invoice("A", 100.0, days_ago=60), make_invoice("B", 300.0, days_ago=90)]
    assert recent_percent_change(invoices, now=NOW) == 0.0


def test_recent_percent_change_empty():
    assert recent_percent_change([], now=NOW) == 0.0


# ─── Section metrics ──────────────────────────────────────────────────────────

def test_invoice_metrics(fleet):
    m = invoice_metrics(fleet["invoices"], now=NOW)

    assert m.total_count == 4
    assert m.total_amount == 1000.0
    assert (m.need_action_count, m.need_action_amount) == (2, 300.0)
    assert (m.escalated_count, m.escalated_amount) == (2, 700.0)
    assert m.avg_amount == 250.0
    assert m.recent_count == 2
    assert m.trend == "up"


def test_truck_and_vendor_metrics(fleet):
    t = truck_metrics(fleet["trucks"], now=NOW)
    v = vendor_metrics(fleet["vendors"], now=NOW)

    assert (t.total_count, t.make_count, t.body_type_count, t.new_count) == (2, 2, 2, 1)
    assert t.percent_new == 50.0
    assert (v.total_count, v.state_count, v.city_count, v.new_count) == (2, 2, 2, 1)
    assert v.percent_new == 50.0


def test_overall_metrics(fleet):
    inv = invoice_metrics(fleet["invoices"], now=NOW)
    o = overall_metrics(inv, truck_metrics(fleet["trucks"], now=NOW), vendor_metrics(fleet["vendors"], now=NOW))

    assert o.avg_invoices_per_vendor == 2.0
    assert o.avg_invoices_per_truck == 2.0
    assert o.avg_amount_per_vendor == 500.0
    assert o.avg_amount_per_truck == 500.0


def test_dashboard_metrics_empty_input_is_zero_model():
    assert dashboard_metrics([], [], [], now=NOW) == empty_dashboard_metrics()


def test_overall_metrics_without_trucks_or_vendors(fleet):
    m = dashboard_metrics(fleet["invoices"], [], [], now=NOW)

    assert m.overall.avg_invoices_per_truck == 0.0
    assert m.overall.avg_amount_per_vendor == 0.0
    assert m.invoices.total_count == 4
