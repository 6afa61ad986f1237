"""Record store interface and the in-memory implementation.

The store is the only shared mutable resource of the dashboard. Reads return
pydantic record types; the single invoice write path is `update_invoice_status`.
Email templates are kept alongside and edited through their own CRUD calls.
Stores also publish live snapshots: `subscribe()` yields the current
snapshot first and then a fresh one after every write.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from freightdesk.core.exceptions import NotFoundError, PersistenceError
from freightdesk.schemas.email_template import (
    EmailTemplateCreate,
    EmailTemplateRecord,
    EmailTemplateUpdate,
)
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.schemas.truck import TruckRecord
from freightdesk.schemas.vendor import VendorRecord
from freightdesk.services.status import InvoiceStatus, is_canonical

logger = logging.getLogger(__name__)


class _NotLoaded:
    """Sentinel for data that has not been fetched yet (distinct from [])."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_LOADED"

    def __bool__(self) -> bool:
        return False


NOT_LOADED = _NotLoaded()


@dataclass(frozen=True)
class StoreSnapshot:
    invoices: list[InvoiceRecord] = field(default_factory=list)
    trucks: list[TruckRecord] = field(default_factory=list)
    vendors: list[VendorRecord] = field(default_factory=list)


class RecordStore(Protocol):
    async def list_invoices(self) -> list[InvoiceRecord]: ...
    async def list_trucks(self) -> list[TruckRecord]: ...
    async def list_vendors(self) -> list[VendorRecord]: ...

    async def get_invoice(self, key: str) -> InvoiceRecord | None: ...
    async def get_truck(self, truck_eid: str) -> TruckRecord | None: ...
    async def get_vendor(self, vendor_eid: str) -> VendorRecord | None: ...

    async def invoices_for_vendor(self, vendor_eid: str) -> list[InvoiceRecord]: ...
    async def trucks_for_vendor(self, vendor_eid: str) -> list[TruckRecord]: ...
    async def invoices_for_truck(self, truck_eid: str) -> list[InvoiceRecord]: ...
    async def vendors_for_truck(self, truck_eid: str) -> list[VendorRecord]: ...

    async def update_invoice_status(self, key: str, status: str) -> InvoiceRecord: ...

    async def list_email_templates(self) -> list[EmailTemplateRecord]: ...
    async def get_email_template(self, template_id: str) -> EmailTemplateRecord | None: ...
    async def create_email_template(self, data: EmailTemplateCreate) -> EmailTemplateRecord: ...
    async def update_email_template(
        self, template_id: str, data: EmailTemplateUpdate
    ) -> EmailTemplateRecord: ...
    async def delete_email_template(self, template_id: str) -> bool: ...

    def subscribe(self) -> "Subscription": ...


def parse_uuid(key: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(key))
    except ValueError:
        return None


def validate_status(status: str) -> str:
    """Return the canonical value of `status` or raise PersistenceError."""
    value = status.value if isinstance(status, InvoiceStatus) else str(status)
    if not is_canonical(value):
        raise PersistenceError(f"Invalid invoice status '{value}'")
    return value


# ─── Live snapshots ───

class Subscription:
    """Async iterator of store snapshots; only the latest unread one is kept."""

    def __init__(self, publisher: "SnapshotPublisher"):
        self._publisher = publisher
        self._queue: asyncio.Queue[StoreSnapshot | Exception] = asyncio.Queue(maxsize=1)
        self._primed = False
        self._closed = False

    def offer(self, item: "StoreSnapshot | Exception") -> None:
        """Queue a snapshot, or the error raised while building one."""
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(item)

    def close(self) -> None:
        self._closed = True
        self._publisher._subscribers.discard(self)

    def __aiter__(self):
        return self

    async def __anext__(self) -> StoreSnapshot:
        if self._closed:
            raise StopAsyncIteration
        if not self._primed:
            self._primed = True
            return await self._publisher.snapshot()
        item = await self._queue.get()
        if isinstance(item, Exception):
            raise item
        return item


class SnapshotPublisher:
    """Mixin that fans store snapshots out to subscribers after writes."""

    def __init__(self) -> None:
        self._subscribers: set[Subscription] = set()

    async def snapshot(self) -> StoreSnapshot:
        invoices, trucks, vendors = await asyncio.gather(
            self.list_invoices(), self.list_trucks(), self.list_vendors()
        )
        return StoreSnapshot(invoices=invoices, trucks=trucks, vendors=vendors)

    def subscribe(self) -> Subscription:
        sub = Subscription(self)
        self._subscribers.add(sub)
        return sub

    async def _publish(self) -> None:
        if not self._subscribers:
            return
        try:
            item = await self.snapshot()
        except Exception as exc:
            logger.error("Snapshot refresh after write failed: %s", exc)
            item = exc
        for sub in list(self._subscribers):
            sub.offer(item)


# ─── In-memory store ───

class InMemoryRecordStore(SnapshotPublisher):
    """Dict-backed store used for development, demos and tests."""

    def __init__(
        self,
        invoices: list[InvoiceRecord] | None = None,
        trucks: list[TruckRecord] | None = None,
        vendors: list[VendorRecord] | None = None,
        templates: list[EmailTemplateRecord] | None = None,
    ):
        super().__init__()
        self._invoices: dict[uuid.UUID, InvoiceRecord] = {i.id: i for i in invoices or []}
        self._trucks: dict[uuid.UUID, TruckRecord] = {t.id: t for t in trucks or []}
        self._vendors: dict[uuid.UUID, VendorRecord] = {v.id: v for v in vendors or []}
        self._templates: dict[str, EmailTemplateRecord] = {t.id: t for t in templates or []}

    # ─── Inserts (upload/seed paths) ───

    def add_truck(self, truck: TruckRecord) -> TruckRecord:
        self._trucks[truck.id] = truck
        return truck

    def add_vendor(self, vendor: VendorRecord) -> VendorRecord:
        self._vendors[vendor.id] = vendor
        return vendor

    def add_invoice(self, invoice: InvoiceRecord) -> InvoiceRecord:
        self._invoices[invoice.id] = invoice
        return invoice

    # ─── Reads ───

    async def list_invoices(self) -> list[InvoiceRecord]:
        return sorted(self._invoices.values(), key=lambda i: i.created_at, reverse=True)

    async def list_trucks(self) -> list[TruckRecord]:
        return sorted(self._trucks.values(), key=lambda t: t.created_at)

    async def list_vendors(self) -> list[VendorRecord]:
        return sorted(self._vendors.values(), key=lambda v: v.created_at)

    def _find_invoice(self, key: str) -> InvoiceRecord | None:
        inv_id = parse_uuid(key)
        if inv_id is not None and inv_id in self._invoices:
            return self._invoices[inv_id]
        return next((i for i in self._invoices.values() if i.invoice_eid == key), None)

    async def get_invoice(self, key: str) -> InvoiceRecord | None:
        return self._find_invoice(key)

    async def get_truck(self, truck_eid: str) -> TruckRecord | None:
        return next((t for t in self._trucks.values() if t.truck_eid == truck_eid), None)

    async def get_vendor(self, vendor_eid: str) -> VendorRecord | None:
        return next((v for v in self._vendors.values() if v.vendor_eid == vendor_eid), None)

    async def invoices_for_vendor(self, vendor_eid: str) -> list[InvoiceRecord]:
        vendor = await self.get_vendor(vendor_eid)
        if vendor is None:
            return []
        return [i for i in await self.list_invoices() if i.vendor_id == vendor.id]

    async def trucks_for_vendor(self, vendor_eid: str) -> list[TruckRecord]:
        truck_ids = dict.fromkeys(i.truck_id for i in await self.invoices_for_vendor(vendor_eid))
        return [self._trucks[tid] for tid in truck_ids if tid in self._trucks]

    async def invoices_for_truck(self, truck_eid: str) -> list[InvoiceRecord]:
        truck = await self.get_truck(truck_eid)
        if truck is None:
            return []
        return [i for i in await self.list_invoices() if i.truck_id == truck.id]

    async def vendors_for_truck(self, truck_eid: str) -> list[VendorRecord]:
        vendor_ids = dict.fromkeys(i.vendor_id for i in await self.invoices_for_truck(truck_eid))
        return [self._vendors[vid] for vid in vendor_ids if vid in self._vendors]

    # ─── Write ───

    async def update_invoice_status(self, key: str, status: str) -> InvoiceRecord:
        value = validate_status(status)
        invoice = self._find_invoice(key)
        if invoice is None:
            raise NotFoundError("invoice", key)
        updated = invoice.model_copy(update={"status": value})
        self._invoices[invoice.id] = updated
        logger.info("Invoice %s status %s -> %s", invoice.invoice_eid, invoice.status, value)
        await self._publish()
        return updated

    # ─── Email templates ───

    async def list_email_templates(self) -> list[EmailTemplateRecord]:
        return sorted(self._templates.values(), key=lambda t: t.created_at)

    async def get_email_template(self, template_id: str) -> EmailTemplateRecord | None:
        return self._templates.get(template_id)

    async def create_email_template(self, data: EmailTemplateCreate) -> EmailTemplateRecord:
        template_id = data.id or uuid.uuid4().hex
        if template_id in self._templates:
            raise PersistenceError(f"Email template '{template_id}' already exists")
        record = EmailTemplateRecord(
            id=template_id,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(exclude={"id"}),
        )
        self._templates[template_id] = record
        logger.info("Email template %s created", template_id)
        return record

    async def update_email_template(
        self, template_id: str, data: EmailTemplateUpdate
    ) -> EmailTemplateRecord:
        template = self._templates.get(template_id)
        if template is None:
            raise NotFoundError("email template", template_id)
        updated = template.model_copy(update=data.model_dump(exclude_unset=True))
        self._templates[template_id] = updated
        return updated

    async def delete_email_template(self, template_id: str) -> bool:
        return self._templates.pop(template_id, None) is not None
