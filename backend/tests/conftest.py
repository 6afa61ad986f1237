"""Shared test setup: test settings and record factories."""
import os

# Must be set before freightdesk.core.config is imported (disables rate limiting).
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("ANTHROPIC_API_KEY", "")

import uuid  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402

from freightdesk.schemas.invoice import InvoiceRecord  # noqa: E402
from freightdesk.schemas.truck import TruckRecord  # noqa: E402
from freightdesk.schemas.vendor import VendorRecord  # noqa: E402
from freightdesk.services.escalation_email import default_template_records  # noqa: E402
from freightdesk.services.store import InMemoryRecordStore  # noqa: E402

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


# ─── Factories ────────────────────────────────────────────────────────────────

def make_truck(eid="TRK-1", make="Volvo", model="VNL", body_type="Sleeper", days_ago=100, **kwargs):
    return TruckRecord(
        id=kwargs.pop("id", uuid.uuid4()),
        truck_eid=eid,
        make=make,
        model=model,
        year=kwargs.pop("year", 2022),
        body_type=body_type,
        vin=kwargs.pop("vin", "4V4NC9EH2NN000001"),
        created_at=NOW - timedelta(days=days_ago),
        **kwargs,
    )


def make_vendor(eid="VND-1", name="Acme Repair", city="Dallas", state="TX", days_ago=100, **kwargs):
    return VendorRecord(
        id=kwargs.pop("id", uuid.uuid4()),
        vendor_eid=eid,
        name=name,
        city=city,
        state=state,
        created_at=NOW - timedelta(days=days_ago),
        **kwargs,
    )


def make_invoice(
    eid="INV-1",
    amount=100.0,
    status="need_action",
    vendor=None,
    truck=None,
    days_ago=10,
    date_issued="auto",
    **kwargs,
):
    created = NOW - timedelta(days=days_ago)
    return InvoiceRecord(
        id=kwargs.pop("id", uuid.uuid4()),
        invoice_eid=eid,
        vendor_id=vendor.id if vendor else kwargs.pop("vendor_id", uuid.uuid4()),
        truck_id=truck.id if truck else kwargs.pop("truck_id", uuid.uuid4()),
        date_issued=created if date_issued == "auto" else date_issued,
        created_at=created,
        total_amount=amount,
        status=status,
        **kwargs,
    )


@pytest.fixture
def fleet():
    """Two trucks, two vendors, four invoices and the built-in templates in a fresh store."""
    t1 = make_truck("TRK-1", make="Volvo", model="VNL", days_ago=200)
    t2 = make_truck("TRK-2", make="Kenworth", model="T680", body_type="Day Cab", days_ago=5)
    v1 = make_vendor("VND-1", name="Lone Star Repair", city="Dallas", state="TX", days_ago=300)
    v2 = make_vendor("VND-2", name="Desert Diesel", city="Phoenix", state="AZ", days_ago=3)
    invoices = [
        make_invoice("INV-1", 100.0, "need_action", vendor=v1, truck=t1, days_ago=90),
        make_invoice("INV-2", 300.0, "escalated", vendor=v1, truck=t2, days_ago=40),
        make_invoice("INV-3", 200.0, "need_action", vendor=v2, truck=t2, days_ago=10),
        make_invoice("INV-4", 400.0, "escalated", vendor=v1, truck=t1, days_ago=2),
    ]
    store = InMemoryRecordStore(
        invoices=invoices, trucks=[t1, t2], vendors=[v1, v2], templates=default_template_records(NOW)
    )
    return {"store": store, "trucks": [t1, t2], "vendors": [v1, v2], "invoices": invoices}
