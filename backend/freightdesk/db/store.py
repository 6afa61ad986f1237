"""SQLAlchemy-backed record store (PostgreSQL in production)."""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from freightdesk.core.exceptions import NotFoundError, PersistenceError
from freightdesk.models.email_template import EmailTemplate
from freightdesk.models.invoice import Invoice
from freightdesk.models.truck import Truck
from freightdesk.models.vendor import Vendor
from freightdesk.schemas.email_template import (
    EmailTemplateCreate,
    EmailTemplateRecord,
    EmailTemplateUpdate,
)
from freightdesk.schemas.invoice import InvoiceRecord
from freightdesk.schemas.truck import TruckRecord
from freightdesk.schemas.vendor import VendorRecord
from freightdesk.services.store import SnapshotPublisher, parse_uuid, validate_status

logger = logging.getLogger(__name__)


def _invoice_key_clause(key: str):
    """Match an invoice by primary key or external id."""
    inv_id = parse_uuid(key)
    if inv_id is None:
        return Invoice.invoice_eid == key
    return or_(Invoice.id == inv_id, Invoice.invoice_eid == key)


class SqlRecordStore(SnapshotPublisher):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__()
        self._session_factory = session_factory

    # ─── Reads ───

    async def list_invoices(self) -> list[InvoiceRecord]:
        async with self._session_factory() as db:
            rows = (await db.execute(
                select(Invoice).order_by(Invoice.created_at.desc())
            )).scalars().all()
        return [InvoiceRecord.model_validate(r) for r in rows]

    async def list_trucks(self) -> list[TruckRecord]:
        async with self._session_factory() as db:
            rows = (await db.execute(select(Truck).order_by(Truck.created_at.asc()))).scalars().all()
        return [TruckRecord.model_validate(r) for r in rows]

    async def list_vendors(self) -> list[VendorRecord]:
        async with self._session_factory() as db:
            rows = (await db.execute(select(Vendor).order_by(Vendor.created_at.asc()))).scalars().all()
        return [VendorRecord.model_validate(r) for r in rows]

    async def get_invoice(self, key: str) -> InvoiceRecord | None:
        async with self._session_factory() as db:
            row = (await db.execute(
                select(Invoice).where(_invoice_key_clause(key)).limit(1)
            )).scalar_one_or_none()
        return InvoiceRecord.model_validate(row) if row is not None else None

    async def get_truck(self, truck_eid: str) -> TruckRecord | None:
        async with self._session_factory() as db:
            row = (await db.execute(
                select(Truck).where(Truck.truck_eid == truck_eid)
            )).scalar_one_or_none()
        return TruckRecord.model_validate(row) if row is not None else None

    async def get_vendor(self, vendor_eid: str) -> VendorRecord | None:
        async with self._session_factory() as db:
            row = (await db.execute(
                select(Vendor).where(Vendor.vendor_eid == vendor_eid)
            )).scalar_one_or_none()
        return VendorRecord.model_validate(row) if row is not None else None

    async def invoices_for_vendor(self, vendor_eid: str) -> list[InvoiceRecord]:
        async with self._session_factory() as db:
            rows = (await db.execute(
                select(Invoice)
                .join(Vendor, Vendor.id == Invoice.vendor_id)
                .where(Vendor.vendor_eid == vendor_eid)
                .order_by(Invoice.created_at.desc())
            )).scalars().all()
        return [InvoiceRecord.model_validate(r) for r in rows]

    async def trucks_for_vendor(self, vendor_eid: str) -> list[TruckRecord]:
        truck_ids_sq = (
            select(Invoice.truck_id)
            .join(Vendor, Vendor.id == Invoice.vendor_id)
            .where(Vendor.vendor_eid == vendor_eid)
        )
        async with self._session_factory() as db:
            rows = (await db.execute(
                select(Truck).where(Truck.id.in_(truck_ids_sq)).order_by(Truck.created_at.asc())
            )).scalars().all()
        return [TruckRecord.model_validate(r) for r in rows]

    async def invoices_for_truck(self, truck_eid: str) -> list[InvoiceRecord]:
        async with self._session_factory() as db:
            rows = (await db.execute(
                select(Invoice)
                .join(Truck, Truck.id == Invoice.truck_id)
                .where(Truck.truck_eid == truck_eid)
                .order_by(Invoice.created_at.desc())
            )).scalars().all()
        return [InvoiceRecord.model_validate(r) for r in rows]

    async def vendors_for_truck(self, truck_eid: str) -> list[VendorRecord]:
        vendor_ids_sq = (
            select(Invoice.vendor_id)
            .join(Truck, Truck.id == Invoice.truck_id)
            .where(Truck.truck_eid == truck_eid)
        )
        async with self._session_factory() as db:
            rows = (await db.execute(
                select(Vendor).where(Vendor.id.in_(vendor_ids_sq)).order_by(Vendor.created_at.asc())
            )).scalars().all()
        return [VendorRecord.model_validate(r) for r in rows]

    # ─── Write ───

    async def update_invoice_status(self, key: str, status: str) -> InvoiceRecord:
        """Set one invoice status; the row lock serializes writers across workers."""
        value = validate_status(status)
        async with self._session_factory() as db:
            try:
                invoice = (await db.execute(
                    select(Invoice).where(_invoice_key_clause(key)).limit(1).with_for_update()
                )).scalar_one_or_none()
                if invoice is None:
                    raise NotFoundError("invoice", key)
                old_status = invoice.status
                invoice.status = value
                await db.commit()
                await db.refresh(invoice)
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.error("update_invoice_status failed for %s: %s", key, exc)
                raise PersistenceError(f"Could not update status of invoice '{key}'") from exc
            record = InvoiceRecord.model_validate(invoice)

        logger.info("Invoice %s status %s -> %s", record.invoice_eid, old_status, value)
        await self._publish()
        return record

    # ─── Email templates ───

    async def list_email_templates(self) -> list[EmailTemplateRecord]:
        async with self._session_factory() as db:
            rows = (await db.execute(
                select(EmailTemplate).order_by(EmailTemplate.created_at.asc())
            )).scalars().all()
        return [EmailTemplateRecord.model_validate(r) for r in rows]

    async def get_email_template(self, template_id: str) -> EmailTemplateRecord | None:
        async with self._session_factory() as db:
            row = (await db.execute(
                select(EmailTemplate).where(EmailTemplate.id == template_id)
            )).scalar_one_or_none()
        return EmailTemplateRecord.model_validate(row) if row is not None else None

    async def create_email_template(self, data: EmailTemplateCreate) -> EmailTemplateRecord:
        template_id = data.id or uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        async with self._session_factory() as db:
            try:
                existing = (await db.execute(
                    select(EmailTemplate).where(EmailTemplate.id == template_id)
                )).scalar_one_or_none()
                if existing is not None:
                    raise PersistenceError(f"Email template '{template_id}' already exists")
                template = EmailTemplate(
                    id=template_id, created_at=now, updated_at=now, **data.model_dump(exclude={"id"})
                )
                db.add(template)
                await db.commit()
                await db.refresh(template)
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.error("create_email_template failed for %s: %s", template_id, exc)
                raise PersistenceError(f"Could not create email template '{template_id}'") from exc
            record = EmailTemplateRecord.model_validate(template)
        logger.info("Email template %s created", template_id)
        return record

    async def update_email_template(
        self, template_id: str, data: EmailTemplateUpdate
    ) -> EmailTemplateRecord:
        async with self._session_factory() as db:
            try:
                template = (await db.execute(
                    select(EmailTemplate).where(EmailTemplate.id == template_id)
                )).scalar_one_or_none()
                if template is None:
                    raise NotFoundError("email template", template_id)
                for field, value in data.model_dump(exclude_unset=True).items():
                    setattr(template, field, value)
                await db.commit()
                await db.refresh(template)
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.error("update_email_template failed for %s: %s", template_id, exc)
                raise PersistenceError(f"Could not update email template '{template_id}'") from exc
            return EmailTemplateRecord.model_validate(template)

    async def delete_email_template(self, template_id: str) -> bool:
        async with self._session_factory() as db:
            template = (await db.execute(
                select(EmailTemplate).where(EmailTemplate.id == template_id)
            )).scalar_one_or_none()
            if template is None:
                return False
            try:
                await db.delete(template)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                raise PersistenceError(f"Could not delete email template '{template_id}'") from exc
        return True
