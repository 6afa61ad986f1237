from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from freightdesk.db.base import Base, TimestampMixin


class EmailTemplate(Base, TimestampMixin):
    __tablename__ = "email_templates"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    action: Mapped[str | None] = mapped_column(String(100), nullable=True)
    recipient: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    sender: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    cc: Mapped[str | None] = mapped_column(String(500), nullable=True)
    bcc: Mapped[str | None] = mapped_column(String(500), nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
