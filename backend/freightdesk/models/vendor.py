from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightdesk.db.base import ArchivableMixin, Base, TimestampMixin, UUIDMixin


class Vendor(Base, UUIDMixin, TimestampMixin, ArchivableMixin):
    __tablename__ = "vendors"

    vendor_eid: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    invoices: Mapped[list["Invoice"]] = relationship("Invoice", back_populates="vendor")
