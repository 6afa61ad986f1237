"""LLM-powered drafting of vendor escalation emails."""
import logging

import anthropic

from freightdesk.core.config import settings
from freightdesk.schemas.invoice import AnalysisItem, InvoiceRecord
from freightdesk.services.formatting import format_currency

logger = logging.getLogger(__name__)

# Issues beyond this many are left out of the prompt and the fallback body.
MAX_ISSUES = 5


def ranked_issues(invoice: InvoiceRecord) -> list[AnalysisItem]:
    """Analysis items, highest weight first (stable for equal weights)."""
    if invoice.analysis is None:
        return []
    return sorted(invoice.analysis.items, key=lambda i: i.weight, reverse=True)


def draft_body(invoice: InvoiceRecord, notes: str | None) -> tuple[str, str]:
    """Draft an escalation email body with Claude.

    Returns: (body_text, source) where source is "ai" or "fallback".
    """
    if not settings.ANTHROPIC_API_KEY:
        return _fallback_body(invoice, notes), "fallback"

    prompt = _build_prompt(invoice, notes)
    try:
        client = anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
        response = client.messages.create(
            model=settings.ANTHROPIC_MODEL,
            max_tokens=800,
            messages=[{"role": "user", "content": prompt}],
        )
        body = response.content[0].text.strip() if response.content else ""
        if not body:
            raise ValueError("empty completion")
        logger.info(
            "Drafted escalation email for invoice %s (in=%d out=%d tokens)",
            invoice.invoice_eid, response.usage.input_tokens, response.usage.output_tokens,
        )
        return body, "ai"
    except Exception as exc:
        logger.error("LLM call failed for invoice %s: %s", invoice.invoice_eid, exc)
        return _fallback_body(invoice, notes), "fallback"


def _build_prompt(invoice: InvoiceRecord, notes: str | None) -> str:
    issue_lines = [
        f"  - {item.description} (weight {item.weight:.2f})"
        for item in ranked_issues(invoice)[:MAX_ISSUES]
    ]
    issue_text = "\n".join(issue_lines) if issue_lines else "  (no flagged issues)"
    analysis_text = invoice.analysis.description if invoice.analysis else "(no analysis available)"

    return f"""You are an accounts payable specialist at a freight company. Write the body of a short, professional email to a vendor escalating a problem with one of their invoices.

## Invoice
- Invoice: #{invoice.invoice_eid}
- Total: {format_currency(invoice.total_amount)}
- Line items: {len(invoice.items)}

## Automated analysis
{analysis_text}

## Flagged issues (most important first)
{issue_text}

## Reviewer notes
{notes or "(none)"}

## Instructions
Start with "Subject: " on the first line, then a blank line, then the body addressed to "Dear Vendor,". Explain the concerns in order of importance and ask for clarification or a revised invoice. Do not add a signature. Do not invent facts beyond what is provided."""


def _fallback_body(invoice: InvoiceRecord, notes: str | None) -> str:
    """Compose the email body without the LLM."""
    lines = [
        f"Subject: Invoice Review Required - Invoice #{invoice.invoice_eid}",
        "",
        "Dear Vendor,",
        "",
        f"We have reviewed invoice #{invoice.invoice_eid} "
        f"({format_currency(invoice.total_amount)}) and need clarification before it can be processed.",
    ]
    if invoice.analysis is not None and invoice.analysis.description:
        lines += ["", invoice.analysis.description]
    issues = ranked_issues(invoice)[:MAX_ISSUES]
    if issues:
        lines += ["", "Specifically:"]
        lines += [f"- {item.description}" for item in issues]
    if notes:
        lines += ["", notes.strip()]
    lines += ["", "Please review and respond at your earliest convenience."]
    return "\n".join(lines)
