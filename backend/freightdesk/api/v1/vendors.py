"""Vendor API endpoints: records, spend statistics and geography."""
import asyncio

from fastapi import APIRouter, HTTPException, Query, status

from freightdesk.core.deps import StoreDep
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.schemas.truck import TruckRecord
from freightdesk.schemas.vendor import GeographyBreakdown, VendorRecord, VendorStatistics
from freightdesk.services.metrics import group_by_geography, vendor_statistics

router = APIRouter()


# ─── Collections ───

@router.get("", response_model=list[VendorRecord], summary="List vendors")
async def list_vendors(store: StoreDep):
    return await store.list_vendors()


@router.get("/statistics", response_model=list[VendorStatistics], summary="Spend per vendor")
async def get_vendor_statistics(store: StoreDep):
    vendors, invoices = await asyncio.gather(store.list_vendors(), store.list_invoices())
    return vendor_statistics(vendors, invoices)


@router.get("/geography", response_model=GeographyBreakdown, summary="Vendor spend by state and city")
async def get_vendor_geography(
    store: StoreDep,
    limit: int | None = Query(default=None, ge=1, le=100, description="Top N per breakdown"),
):
    vendors, invoices = await asyncio.gather(store.list_vendors(), store.list_invoices())
    return group_by_geography(vendor_statistics(vendors, invoices), limit=limit)


# ─── Single vendor ───

@router.get("/{vendor_eid}", response_model=VendorRecord, summary="Get vendor detail")
async def get_vendor(vendor_eid: str, store: StoreDep):
    vendor = await store.get_vendor(vendor_eid)
    if vendor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found.")
    return vendor


@router.get("/{vendor_eid}/invoices", response_model=list[InvoiceRecord], summary="Invoices from a vendor")
async def get_vendor_invoices(vendor_eid: str, store: StoreDep):
    return await store.invoices_for_vendor(vendor_eid)


@router.get("/{vendor_eid}/trucks", response_model=list[TruckRecord], summary="Trucks a vendor has serviced")
async def get_vendor_trucks(vendor_eid: str, store: StoreDep):
    return await store.trucks_for_vendor(vendor_eid)
