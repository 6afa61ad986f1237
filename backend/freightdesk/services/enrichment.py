"""Catalog part suggestions shown next to an invoice's line items."""
import logging

from freightdesk.schemas.invoice import EnrichmentSuggestions, InvoiceItemView, InvoiceRecord

logger = logging.getLogger(__name__)

# (description, type, quantity, unit_cost, match_score)
SUGGESTION_CATALOG = [
    ("3-in-1 Airline Set with Gladhands (15 feet)", "part", 1, 165.0, 98.0),
    ("2-in-1 Airline Set with Gladhands (15 feet)", "part", 1, 100.0, 85.0),
]


def enrichment_suggestions(invoice: InvoiceRecord) -> EnrichmentSuggestions:
    # Fixed catalog until a parts-matching source exists.
    logger.debug("Enrichment suggestions requested for invoice %s", invoice.invoice_eid)
    return EnrichmentSuggestions(items=[
        InvoiceItemView(
            id=str(n),
            description=description,
            type=item_type,
            quantity=quantity,
            unit_cost=unit_cost,
            total_cost=round(quantity * unit_cost, 2),
            match_score=score,
        )
        for n, (description, item_type, quantity, unit_cost, score) in enumerate(SUGGESTION_CATALOG, start=1)
    ])
