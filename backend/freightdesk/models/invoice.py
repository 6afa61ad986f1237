import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, JSON, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightdesk.db.base import Base, TimestampMixin, UUIDMixin


class Invoice(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "invoices"

    invoice_eid: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    vendor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("vendors.id"), nullable=False, index=True
    )
    truck_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("trucks.id"), nullable=False, index=True
    )
    date_issued: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_amount: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="need_action", index=True
    )  # need_action, escalated
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # [{description, quantity, unit_cost, total}], written once at upload
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list, server_default=text("'[]'"))
    # {description, timestamp, items: [{description, weight}]}
    analysis: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    vendor: Mapped["Vendor"] = relationship("Vendor", back_populates="invoices")
    truck: Mapped["Truck"] = relationship("Truck", back_populates="invoices")
