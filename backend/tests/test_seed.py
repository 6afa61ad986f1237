"""Tests for the demo seed data."""
import pytest

from freightdesk.core.seed import DEMO_INVOICES, build_demo_records, seed_memory_store
from freightdesk.services.kpi import dashboard_metrics
from freightdesk.services.status import is_canonical
from freightdesk.services.store import InMemoryRecordStore

from conftest import NOW


def test_demo_records_are_deterministic():
    first = build_demo_records(NOW)
    second = build_demo_records(NOW)
    assert [i.id for i in first[2]] == [i.id for i in second[2]]
    assert first == second


def test_demo_invoices_reference_known_entities():
    trucks, vendors, invoices = build_demo_records(NOW)
    truck_ids = {t.id for t in trucks}
    vendor_ids = {v.id for v in vendors}

    assert len(invoices) == len(DEMO_INVOICES)
    assert all(i.truck_id in truck_ids and i.vendor_id in vendor_ids for i in invoices)
    assert all(is_canonical(i.status) for i in invoices)
    assert all(i.total_amount == round(sum(li.total for li in i.items), 2) for i in invoices)


@pytest.mark.asyncio
async def test_seed_memory_store_populates_dashboard():
    store = InMemoryRecordStore()
    seed_memory_store(store, now=NOW)

    snapshot = await store.snapshot()
    metrics = dashboard_metrics(snapshot.invoices, snapshot.trucks, snapshot.vendors, now=NOW)

    assert metrics.invoices.total_count == len(DEMO_INVOICES)
    assert metrics.invoices.recent_count > 0
    assert metrics.trucks.new_count == 1
