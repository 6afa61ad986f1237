"""Truck API endpoints."""
import asyncio

from fastapi import APIRouter, HTTPException, status

from freightdesk.core.deps import StoreDep
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.schemas.truck import TruckRecord, TruckStatistics
from freightdesk.schemas.vendor import VendorRecord
from freightdesk.services.metrics import truck_statistics

router = APIRouter()


@router.get("", response_model=list[TruckRecord], summary="List trucks")
async def list_trucks(store: StoreDep):
    return await store.list_trucks()


@router.get("/statistics", response_model=list[TruckStatistics], summary="Spend per truck")
async def get_truck_statistics(store: StoreDep):
    trucks, invoices = await asyncio.gather(store.list_trucks(), store.list_invoices())
    return truck_statistics(trucks, invoices)


@router.get("/{truck_eid}", response_model=TruckRecord, summary="Get truck detail")
async def get_truck(truck_eid: str, store: StoreDep):
    truck = await store.get_truck(truck_eid)
    if truck is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Truck not found.")
    return truck


@router.get("/{truck_eid}/invoices", response_model=list[InvoiceRecord], summary="Invoices billed to a truck")
async def get_truck_invoices(truck_eid: str, store: StoreDep):
    return await store.invoices_for_truck(truck_eid)


@router.get("/{truck_eid}/vendors", response_model=list[VendorRecord], summary="Vendors that serviced a truck")
async def get_truck_vendors(truck_eid: str, store: StoreDep):
    return await store.vendors_for_truck(truck_eid)
