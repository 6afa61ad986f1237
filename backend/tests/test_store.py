"""Tests for the in-memory record store and its live subscriptions."""
import asyncio

import pytest

from freightdesk.core.exceptions import NotFoundError, PersistenceError
from freightdesk.services.store import NOT_LOADED, InMemoryRecordStore


# ─── Reads ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_invoices_newest_first(fleet):
    invoices = await fleet["store"].list_invoices()
    assert [i.invoice_eid for i in invoices] == ["INV-4", "INV-3", "INV-2", "INV-1"]


@pytest.mark.asyncio
async def test_get_invoice_by_eid_or_id(fleet):
    store = fleet["store"]
    inv = fleet["invoices"][0]

    assert (await store.get_invoice("INV-1")).id == inv.id
    assert (await store.get_invoice(str(inv.id))).invoice_eid == "INV-1"
    assert await store.get_invoice("INV-404") is None


@pytest.mark.asyncio
async def test_relationship_reads(fleet):
    store = fleet["store"]

    vendor_invoices = await store.invoices_for_vendor("VND-1")
    assert {i.invoice_eid for i in vendor_invoices} == {"INV-1", "INV-2", "INV-4"}
    assert [t.truck_eid for t in await store.trucks_for_vendor("VND-2")] == ["TRK-2"]
    assert {v.vendor_eid for v in await store.vendors_for_truck("TRK-2")} == {"VND-1", "VND-2"}
    assert len(await store.invoices_for_truck("TRK-1")) == 2


@pytest.mark.asyncio
async def test_relationship_reads_unknown_parent_are_empty(fleet):
    store = fleet["store"]

    assert await store.invoices_for_vendor("VND-404") == []
    assert await store.trucks_for_vendor("VND-404") == []
    assert await store.invoices_for_truck("TRK-404") == []
    assert await store.vendors_for_truck("TRK-404") == []


# ─── Status write ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_invoice_status(fleet):
    store = fleet["store"]

    updated = await store.update_invoice_status("INV-1", "escalated")

    assert updated.status == "escalated"
    assert (await store.get_invoice("INV-1")).status == "escalated"
    assert fleet["invoices"][0].status == "need_action"  # records are copied, not mutated


@pytest.mark.asyncio
async def test_update_unknown_invoice_raises_not_found(fleet):
    with pytest.raises(NotFoundError):
        await fleet["store"].update_invoice_status("INV-404", "escalated")


@pytest.mark.asyncio
async def test_update_rejects_non_canonical_status(fleet):
    with pytest.raises(PersistenceError):
        await fleet["store"].update_invoice_status("INV-1", "approved")


# ─── Subscriptions ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_subscription_yields_current_then_updates(fleet):
    store = fleet["store"]
    sub = store.subscribe()

    first = await sub.__anext__()
    assert len(first.invoices) == 4

    await store.update_invoice_status("INV-1", "escalated")
    second = await asyncio.wait_for(sub.__anext__(), timeout=1)

    escalated = [i for i in second.invoices if i.status == "escalated"]
    assert len(escalated) == 3
    sub.close()


@pytest.mark.asyncio
async def test_subscription_keeps_only_latest_snapshot(fleet):
    store = fleet["store"]
    sub = store.subscribe()
    await sub.__anext__()

    await store.update_invoice_status("INV-1", "escalated")
    await store.update_invoice_status("INV-1", "need_action")
    latest = await asyncio.wait_for(sub.__anext__(), timeout=1)

    assert next(i for i in latest.invoices if i.invoice_eid == "INV-1").status == "need_action"
    sub.close()


@pytest.mark.asyncio
async def test_closed_subscription_stops_iteration():
    store = InMemoryRecordStore()
    sub = store.subscribe()
    sub.close()

    with pytest.raises(StopAsyncIteration):
        await sub.__anext__()


def test_not_loaded_sentinel_is_distinct_from_empty():
    assert NOT_LOADED is not None
    assert NOT_LOADED != []
    assert not NOT_LOADED
    assert repr(NOT_LOADED) == "NOT_LOADED"
