"""Pydantic schemas for vendor records, statistics and geography."""
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class VendorRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    vendor_eid: str
    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone: str = ""
    created_at: datetime
    is_archived: bool = False


class VendorStatistics(BaseModel):
    vendor_id: uuid.UUID
    vendor_eid: str
    name: str
    state: str
    city: str
    invoice_count: int
    total_spend: float
    avg_invoice_amount: float


# ─── Geography ───

class GeoBucket(BaseModel):
    name: str                 # state code, or "<city>, <state>"
    state: str
    vendor_count: int = 0
    invoice_count: int = 0
    total_spend: float = 0.0


class GeographyBreakdown(BaseModel):
    by_state: list[GeoBucket] = []
    by_city: list[GeoBucket] = []
