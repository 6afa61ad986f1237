"""Invoice API endpoints: reads, status lifecycle, detail views, escalation email."""
import logging

from fastapi import APIRouter, HTTPException, Query, Request, status

from freightdesk.core.deps import BadgesDep, StoreDep
from freightdesk.core.exceptions import NotFoundError, PersistenceError
from freightdesk.core.limiter import STATUS_UPDATE_LIMIT, limiter
from freightdesk.schemas.dashboard import InvoiceChartData
from freightdesk.schemas.invoice import (
    EnrichmentSuggestions,
    EscalationEmail,
    EscalationEmailRequest,
    InvoiceAnalysisView,
    InvoiceItemView,
    InvoiceRecord,
    StatusBadgeResponse,
    StatusOption,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from freightdesk.services.enrichment import enrichment_suggestions
from freightdesk.services.escalation_email import (
    draft_escalation_email,
    get_template,
    send_escalation_email,
)
from freightdesk.services.invoice_views import build_analysis_view, build_item_views
from freightdesk.services.metrics import get_invoice_chart_data
from freightdesk.services.status import STATUS_COLORS, STATUS_ORDER, status_label
from freightdesk.services.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_invoice_or_404(store: RecordStore, invoice_eid: str) -> InvoiceRecord:
    invoice = await store.get_invoice(invoice_eid)
    if invoice is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found.")
    return invoice


# ─── Reads ───

@router.get("", response_model=list[InvoiceRecord], summary="List invoices, newest first")
async def list_invoices(store: StoreDep):
    return await store.list_invoices()


@router.get("/chart-data", response_model=InvoiceChartData, summary="Invoice chart groupings")
async def invoice_chart_data(store: StoreDep):
    return get_invoice_chart_data(await store.list_invoices())


@router.get("/statuses", response_model=list[StatusOption], summary="Status cycle with labels and colours")
async def list_statuses():
    return [
        StatusOption(value=s, label=status_label(s), color=STATUS_COLORS[s])
        for s in STATUS_ORDER
    ]


@router.get("/{invoice_eid}", response_model=InvoiceRecord, summary="Get invoice detail")
async def get_invoice(invoice_eid: str, store: StoreDep):
    return await _get_invoice_or_404(store, invoice_eid)


# ─── Status lifecycle ───

@router.patch(
    "/{invoice_eid}/status",
    response_model=StatusUpdateResponse,
    summary="Set invoice status and persist it immediately",
)
@limiter.limit(STATUS_UPDATE_LIMIT)
async def update_invoice_status(
    request: Request,
    invoice_eid: str,
    body: StatusUpdateRequest,
    store: StoreDep,
    badges: BadgesDep,
):
    invoice = await _get_invoice_or_404(store, invoice_eid)
    badge = badges.get(invoice)
    badge.set_status(body.status)
    try:
        committed = await badge.flush()
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    logger.info("Invoice %s status set to %s via API", invoice.invoice_eid, committed.value)
    return StatusUpdateResponse(
        invoice_eid=invoice.invoice_eid,
        status=committed,
        message=f"Status updated to {status_label(committed)}.",
    )


@router.post(
    "/{invoice_eid}/status/advance",
    response_model=StatusBadgeResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Advance invoice status (debounced write-through)",
)
@limiter.limit(STATUS_UPDATE_LIMIT)
async def advance_invoice_status(
    request: Request,
    invoice_eid: str,
    store: StoreDep,
    badges: BadgesDep,
):
    invoice = await _get_invoice_or_404(store, invoice_eid)
    badge = badges.get(invoice)
    badge.click()
    return StatusBadgeResponse(
        invoice_eid=invoice.invoice_eid,
        status=badge.status,
        committed_status=badge.committed_status,
        state=badge.state.value,
    )


# ─── Detail views ───

@router.get("/{invoice_eid}/items", response_model=list[InvoiceItemView], summary="Invoice line items")
async def get_invoice_items(invoice_eid: str, store: StoreDep):
    return build_item_views(await _get_invoice_or_404(store, invoice_eid))


@router.get(
    "/{invoice_eid}/analysis",
    response_model=InvoiceAnalysisView | None,
    summary="Invoice analysis with issues ranked by weight",
)
async def get_invoice_analysis(invoice_eid: str, store: StoreDep):
    return build_analysis_view(await _get_invoice_or_404(store, invoice_eid))


@router.get(
    "/{invoice_eid}/enrichment",
    response_model=EnrichmentSuggestions,
    summary="Catalog part suggestions for invoice line items",
)
async def get_invoice_enrichment(invoice_eid: str, store: StoreDep):
    return enrichment_suggestions(await _get_invoice_or_404(store, invoice_eid))


# ─── Escalation email ───

@router.post(
    "/{invoice_eid}/escalation-email",
    response_model=EscalationEmail,
    summary="Draft (and optionally send) a vendor escalation email",
)
async def create_escalation_email(
    invoice_eid: str,
    body: EscalationEmailRequest,
    store: StoreDep,
    send: bool = Query(default=False, description="Deliver the drafted email"),
):
    invoice = await _get_invoice_or_404(store, invoice_eid)
    template = None
    if body.template_id:
        try:
            template = await get_template(store, body.template_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    email = await draft_escalation_email(invoice, notes=body.notes, template=template)
    if send:
        send_escalation_email(email)
    return email
