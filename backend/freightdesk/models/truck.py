from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightdesk.db.base import ArchivableMixin, Base, TimestampMixin, UUIDMixin


class Truck(Base, UUIDMixin, TimestampMixin, ArchivableMixin):
    __tablename__ = "trucks"

    truck_eid: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    make: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    body_type: Mapped[str] = mapped_column(String(100), nullable=False)
    vin: Mapped[str] = mapped_column(String(17), nullable=False, index=True)

    invoices: Mapped[list["Invoice"]] = relationship("Invoice", back_populates="truck")
