"""Detail views of a single invoice: line items and analysis."""
from freightdesk.ai.escalation_drafter import ranked_issues
from freightdesk.schemas.invoice import InvoiceAnalysisView, InvoiceItemView, InvoiceRecord

DEFAULT_ITEM_TYPE = "Part"
DEFAULT_MATCH_SCORE = 95.0


def build_item_views(invoice: InvoiceRecord) -> list[InvoiceItemView]:
    return [
        InvoiceItemView(
            id=str(idx + 1),
            description=item.description,
            type=DEFAULT_ITEM_TYPE,
            quantity=item.quantity,
            unit_cost=item.unit_cost,
            total_cost=item.total,
            match_score=DEFAULT_MATCH_SCORE,
        )
        for idx, item in enumerate(invoice.items)
    ]


def build_analysis_view(invoice: InvoiceRecord) -> InvoiceAnalysisView | None:
    if invoice.analysis is None:
        return None
    return InvoiceAnalysisView(
        description=invoice.analysis.description,
        timestamp=invoice.analysis.timestamp,
        issues=ranked_issues(invoice),
    )
