"""Pydantic schemas for truck records and truck statistics."""
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TruckRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    truck_eid: str
    make: str
    model: str
    year: int
    body_type: str
    vin: str
    created_at: datetime
    is_archived: bool = False

    @property
    def display_name(self) -> str:
        return f"{self.make} {self.model} ({self.truck_eid})"


class TruckStatistics(BaseModel):
    truck_id: uuid.UUID
    truck_eid: str
    make: str
    model: str
    invoice_count: int
    total_spend: float
    avg_invoice_amount: float
