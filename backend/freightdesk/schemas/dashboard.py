"""Dashboard chart and KPI Pydantic schemas."""
import uuid

from pydantic import BaseModel


# ─── Chart groupings ───

class StatusBucket(BaseModel):
    status: str
    count: int
    amount: float


class MonthBucket(BaseModel):
    month: str                  # YYYY-MM
    count: int
    amount: float
    by_status: dict[str, int]   # canonical status -> invoice count


class TruckBucket(BaseModel):
    truck_id: uuid.UUID
    count: int
    amount: float


class VendorBucket(BaseModel):
    vendor_id: uuid.UUID
    count: int
    amount: float


class InvoiceChartData(BaseModel):
    by_status: list[StatusBucket] = []
    by_month: list[MonthBucket] = []
    by_truck: list[TruckBucket] = []
    by_vendor: list[VendorBucket] = []


class LabelledBar(BaseModel):
    id: uuid.UUID
    name: str
    amount: float
    count: int


class DashboardChartData(BaseModel):
    chart_data: InvoiceChartData
    truck_bars: list[LabelledBar]
    vendor_bars: list[LabelledBar]


# ─── KPIs ───

class InvoiceMetrics(BaseModel):
    total_count: int
    total_amount: float
    need_action_count: int
    need_action_amount: float
    escalated_count: int
    escalated_amount: float
    avg_amount: float
    recent_count: int
    percent_change: float   # recent-window average vs overall average, in %
    trend: str              # up, down


class TruckMetrics(BaseModel):
    total_count: int
    make_count: int
    body_type_count: int
    new_count: int
    percent_new: float


class VendorMetrics(BaseModel):
    total_count: int
    state_count: int
    city_count: int
    new_count: int
    percent_new: float


class OverallMetrics(BaseModel):
    avg_invoices_per_vendor: float
    avg_invoices_per_truck: float
    avg_amount_per_vendor: float
    avg_amount_per_truck: float


class DashboardMetrics(BaseModel):
    invoices: InvoiceMetrics
    trucks: TruckMetrics
    vendors: VendorMetrics
    overall: OverallMetrics
