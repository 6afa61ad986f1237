"""Seed demo trucks, vendors and invoices."""
import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from freightdesk.models import Invoice, Truck, Vendor
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.schemas.truck import TruckRecord
from freightdesk.schemas.vendor import VendorRecord
from freightdesk.services.store import InMemoryRecordStore

logger = logging.getLogger(__name__)

_NAMESPACE = uuid.UUID("6f1c2a54-3d1e-4c8b-9a57-0d2f7e4b1a90")

# (truck_eid, make, model, year, body_type, vin, age_days)
DEMO_TRUCKS = [
    ("TRK-1001", "Freightliner", "Cascadia", 2021, "Sleeper", "1FUJHHDR1MLM00001", 400),
    ("TRK-1002", "Volvo", "VNL 860", 2022, "Sleeper", "4V4NC9EH2NN000002", 250),
    ("TRK-1003", "Kenworth", "T680", 2020, "Day Cab", "1XKYD49X0LJ000003", 520),
    ("TRK-1004", "Peterbilt", "579", 2023, "Day Cab", "1XPBD49X1PD000004", 12),
]

# (vendor_eid, name, address, city, state, zip_code, phone, age_days)
DEMO_VENDORS = [
    ("VND-201", "Lone Star Truck Repair", "1200 Industrial Blvd", "Dallas", "TX", "75207", "214-555-0101", 380),
    ("VND-202", "Gulf Coast Fleet Service", "88 Harbor Rd", "Houston", "TX", "77002", "713-555-0102", 300),
    ("VND-203", "Desert Diesel Works", "45 Sun Valley Pkwy", "Phoenix", "AZ", "85004", "602-555-0103", 210),
    ("VND-204", "Peach State Tire & Brake", "9 Peachtree Ct", "Atlanta", "GA", "30303", "404-555-0104", 20),
    ("VND-205", "Rocky Mountain Mobile Mechanics", "700 Front Range Ave", "Denver", "CO", "80202", "303-555-0105", 5),
]

# (invoice_eid, vendor_eid, truck_eid, issued_days_ago, status, items, analysis)
# items: (description, quantity, unit_cost)
# analysis: (description, [(issue, weight)]) or None
DEMO_INVOICES = [
    ("INV-5001", "VND-201", "TRK-1001", 150, "need_action",
     [("Preventive maintenance service", 1, 450.0), ("Oil filter", 2, 38.5)],
     ("Preventive maintenance billed above contracted rate.",
      [("PM labor exceeds contracted rate by 18%", 0.8), ("Filter price above catalog", 0.3)])),
    ("INV-5002", "VND-202", "TRK-1002", 120, "escalated",
     [("Brake pad replacement", 4, 95.0), ("Labor", 3, 120.0)],
     ("Brake service repeated within 45 days of prior service.",
      [("Same service performed 45 days ago", 0.9)])),
    ("INV-5003", "VND-203", "TRK-1003", 95, "need_action",
     [("Coolant flush", 1, 180.0)], None),
    ("INV-5004", "VND-201", "TRK-1002", 70, "need_action",
     [("DEF system diagnostic", 1, 275.0), ("DEF sensor", 1, 412.0)],
     ("Sensor replaced without pre-authorization.",
      [("Parts over $250 require pre-approval", 0.7), ("Diagnostic fee duplicated", 0.4)])),
    ("INV-5005", "VND-202", "TRK-1001", 45, "escalated",
     [("Tire replacement", 6, 310.0), ("Alignment", 1, 150.0)],
     ("Tire count exceeds axle configuration.",
      [("Six tires billed, four replaced per work order", 0.85)])),
    ("INV-5006", "VND-204", "TRK-1004", 18, "need_action",
     [("Brake chamber", 2, 140.0), ("Labor", 2, 110.0)], None),
    ("INV-5007", "VND-203", "TRK-1003", 10, "need_action",
     [("Alternator", 1, 520.0), ("Labor", 2.5, 115.0)],
     ("Labor hours above book time.", [("Book time is 1.5h, billed 2.5h", 0.6)])),
    ("INV-5008", "VND-205", "TRK-1004", 3, "need_action",
     [("Roadside service call", 1, 350.0), ("Battery", 2, 210.0)], None),
]


def _demo_id(kind: str, eid: str) -> uuid.UUID:
    return uuid.uuid5(_NAMESPACE, f"{kind}:{eid}")


def build_demo_records(
    now: datetime | None = None,
) -> tuple[list[TruckRecord], list[VendorRecord], list[InvoiceRecord]]:
    """Deterministic demo records; ages are relative to `now`."""
    now = now or datetime.now(timezone.utc)

    trucks = [
        TruckRecord(
            id=_demo_id("truck", eid), truck_eid=eid, make=make, model=model, year=year,
            body_type=body, vin=vin, created_at=now - timedelta(days=age),
        )
        for eid, make, model, year, body, vin, age in DEMO_TRUCKS
    ]
    vendors = [
        VendorRecord(
            id=_demo_id("vendor", eid), vendor_eid=eid, name=name, address=address, city=city,
            state=state, zip_code=zip_code, phone=phone, created_at=now - timedelta(days=age),
        )
        for eid, name, address, city, state, zip_code, phone, age in DEMO_VENDORS
    ]

    invoices = []
    for eid, vendor_eid, truck_eid, days_ago, status, items, analysis in DEMO_INVOICES:
        issued = now - timedelta(days=days_ago)
        line_items = [
            {"description": d, "quantity": q, "unit_cost": c, "total": round(q * c, 2)}
            for d, q, c in items
        ]
        analysis_doc = None
        if analysis is not None:
            description, issues = analysis
            analysis_doc = {
                "description": description,
                "timestamp": issued + timedelta(hours=2),
                "items": [{"description": i, "weight": w} for i, w in issues],
            }
        invoices.append(InvoiceRecord(
            id=_demo_id("invoice", eid),
            invoice_eid=eid,
            vendor_id=_demo_id("vendor", vendor_eid),
            truck_id=_demo_id("truck", truck_eid),
            date_issued=issued,
            created_at=issued + timedelta(hours=1),
            total_amount=round(sum(li["total"] for li in line_items), 2),
            status=status,
            items=line_items,
            analysis=analysis_doc,
        ))
    return trucks, vendors, invoices


def seed_memory_store(store: InMemoryRecordStore, now: datetime | None = None) -> None:
    trucks, vendors, invoices = build_demo_records(now)
    for truck in trucks:
        store.add_truck(truck)
    for vendor in vendors:
        store.add_vendor(vendor)
    for invoice in invoices:
        store.add_invoice(invoice)
    logger.info(
        "Seeded demo data: %d trucks, %d vendors, %d invoices",
        len(trucks), len(vendors), len(invoices),
    )


async def seed_database(db: AsyncSession) -> None:
    """Insert the demo records unless the invoices table already has rows."""
    existing = (await db.execute(select(func.count()).select_from(Invoice))).scalar_one()
    if existing:
        logger.info("Invoices already present (%d), skipping seed", existing)
        return

    trucks, vendors, invoices = build_demo_records()
    db.add_all(Truck(**t.model_dump()) for t in trucks)
    db.add_all(Vendor(**v.model_dump()) for v in vendors)
    await db.flush()
    for inv in invoices:
        json_fields = inv.model_dump(mode="json", include={"items", "analysis"})
        db.add(Invoice(
            id=inv.id,
            invoice_eid=inv.invoice_eid,
            vendor_id=inv.vendor_id,
            truck_id=inv.truck_id,
            date_issued=inv.date_issued,
            created_at=inv.created_at,
            total_amount=inv.total_amount,
            status=inv.status,
            items=json_fields["items"],
            analysis=json_fields["analysis"],
        ))
    await db.commit()
    logger.info("Seeded %d trucks, %d vendors, %d invoices", len(trucks), len(vendors), len(invoices))


async def run_seed() -> None:
    from freightdesk.db.session import AsyncSessionLocal

    async with AsyncSessionLocal() as db:
        await seed_database(db)
    logger.info("Seeding complete.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run_seed())
