"""Pydantic schemas for invoice records and invoice API endpoints."""
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from freightdesk.services.status import InvoiceStatus


# ─── Record types ───

class LineItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    quantity: float
    unit_cost: float
    total: float


class AnalysisItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    weight: float


class InvoiceAnalysis(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    timestamp: datetime
    items: list[AnalysisItem] = []


class InvoiceRecord(BaseModel):
    """An invoice as read from the record store.

    `status` stays a plain string on read so that rows carrying a value
    outside InvoiceStatus reach the aggregator instead of failing validation.
    """
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    invoice_eid: str
    vendor_id: uuid.UUID
    truck_id: uuid.UUID
    date_issued: datetime | None = None
    created_at: datetime
    total_amount: float
    status: str
    notes: str | None = None
    items: list[LineItem] = []
    analysis: InvoiceAnalysis | None = None

    @property
    def effective_date(self) -> datetime:
        return self.date_issued or self.created_at


# ─── Status mutation ───

class StatusUpdateRequest(BaseModel):
    status: InvoiceStatus


class StatusUpdateResponse(BaseModel):
    invoice_eid: str
    status: InvoiceStatus
    message: str


class StatusBadgeResponse(BaseModel):
    invoice_eid: str
    status: InvoiceStatus            # displayed
    committed_status: InvoiceStatus
    state: str                       # idle, pending_commit, committing


class StatusOption(BaseModel):
    value: InvoiceStatus
    label: str
    color: str


# ─── Detail views ───

class InvoiceItemView(BaseModel):
    id: str
    description: str
    type: str
    quantity: float
    unit_cost: float
    total_cost: float
    match_score: float | None = None


class EnrichmentSuggestions(BaseModel):
    items: list[InvoiceItemView]


class InvoiceAnalysisView(BaseModel):
    description: str
    timestamp: datetime
    issues: list[AnalysisItem]  # highest weight first


# ─── Escalation email ───

class EscalationEmailRequest(BaseModel):
    template_id: str | None = None
    notes: str | None = None


class EscalationEmail(BaseModel):
    invoice_eid: str
    subject: str
    body: str
    signature: str
    source: str  # template, ai, fallback

    @property
    def full_text(self) -> str:
        return f"Subject: {self.subject}\n\n{self.body}\n\n{self.signature}"
