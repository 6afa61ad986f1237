"""Escalation email drafting and (mock) delivery.

Emails come either from a stored template or are generated from the invoice
analysis plus reviewer notes. Templates live in the record store; the three
built-in ones are installed at startup when missing. When MAIL_ENABLED is
False the email is written to the log instead of being sent.
"""
import asyncio
import logging
from datetime import datetime, timezone

from freightdesk.ai.escalation_drafter import draft_body
from freightdesk.core.config import settings
from freightdesk.core.exceptions import NotFoundError
from freightdesk.schemas.email_template import EmailTemplateCreate, EmailTemplateRecord
from freightdesk.schemas.invoice import EscalationEmail, InvoiceRecord
from freightdesk.services.store import RecordStore

logger = logging.getLogger(__name__)

INVOICE_PLACEHOLDER = "{invoice_eid}"


# ─── Templates ───

DEFAULT_TEMPLATES: list[EmailTemplateCreate] = [
    EmailTemplateCreate(
        id="pricing",
        name="Pricing Discrepancy",
        action="Required",
        subject="Invoice Pricing Discrepancy - Invoice #{invoice_eid}",
        body=(
            "Dear Vendor,\n\n"
            "We are writing to address a pricing discrepancy on your recent invoice. "
            "Our records indicate that the agreed-upon pricing for the services rendered "
            "differs from what was billed. Specifically, the preventive maintenance costs "
            "exceed our contracted rates.\n\n"
            "Please review and provide clarification on this matter at your earliest convenience."
        ),
    ),
    EmailTemplateCreate(
        id="frequency",
        name="Maintenance Frequency",
        action="Required",
        subject="Maintenance Frequency Concern - Invoice #{invoice_eid}",
        body=(
            "Dear Vendor,\n\n"
            "We are writing regarding your recent invoice for preventive maintenance services. "
            "According to our records, similar maintenance was performed just 45 days ago, "
            "whereas our policy requires a 90-day interval between such services.\n\n"
            "Please provide clarification on the necessity of this maintenance interval."
        ),
    ),
    EmailTemplateCreate(
        id="unauthorized",
        name="Unauthorized Services",
        action="Required",
        subject="Unauthorized Services on Invoice #{invoice_eid}",
        body=(
            "Dear Vendor,\n\n"
            "We have received your invoice that includes services which were not "
            "pre-authorized according to our agreement. Specifically, the additional services "
            "beyond basic maintenance were not approved in advance as required by our "
            "service contract.\n\n"
            "Please provide documentation of the pre-approval for these services or issue "
            "a revised invoice."
        ),
    ),
]


def default_template_records(now: datetime | None = None) -> list[EmailTemplateRecord]:
    """The built-in templates as records, for seeding an in-memory store."""
    now = now or datetime.now(timezone.utc)
    return [
        EmailTemplateRecord(created_at=now, **t.model_dump(exclude={"id"}), id=t.id)
        for t in DEFAULT_TEMPLATES
    ]


async def install_default_templates(store: RecordStore) -> int:
    """Create any built-in template missing from `store`; returns how many were added."""
    added = 0
    for template in DEFAULT_TEMPLATES:
        if await store.get_email_template(template.id) is None:
            await store.create_email_template(template)
            added += 1
    if added:
        logger.info("Installed %d default email templates", added)
    return added


async def get_template(store: RecordStore, template_id: str) -> EmailTemplateRecord:
    template = await store.get_email_template(template_id)
    if template is None:
        raise NotFoundError("template", template_id)
    return template


def _split_subject(text: str, default_subject: str) -> tuple[str, str]:
    """Pull a leading 'Subject: ...' line off a drafted body."""
    first, _, rest = text.partition("\n")
    if first.lower().startswith("subject:"):
        return first.split(":", 1)[1].strip(), rest.lstrip("\n")
    return default_subject, text


# ─── Drafting ───

async def draft_escalation_email(
    invoice: InvoiceRecord,
    notes: str | None = None,
    template: EmailTemplateRecord | None = None,
) -> EscalationEmail:
    """Build an escalation email for `invoice`.

    With `template` its subject (with `{invoice_eid}` filled in) and body are
    used. Otherwise the body is drafted from the analysis and `notes`.
    """
    if template is not None:
        return EscalationEmail(
            invoice_eid=invoice.invoice_eid,
            subject=template.subject.replace(INVOICE_PLACEHOLDER, invoice.invoice_eid),
            body=template.body,
            signature=settings.ESCALATION_SIGNATURE,
            source="template",
        )

    # Anthropic's sync client blocks; keep it off the event loop
    text, source = await asyncio.to_thread(draft_body, invoice, notes)
    subject, body = _split_subject(
        text, f"Invoice Review Required - Invoice #{invoice.invoice_eid}"
    )
    return EscalationEmail(
        invoice_eid=invoice.invoice_eid,
        subject=subject,
        body=body,
        signature=settings.ESCALATION_SIGNATURE,
        source=source,
    )


# ─── Delivery ───

def send_escalation_email(email: EscalationEmail, to: str = "vendor@example.com") -> None:
    """Send (or mock-log) an escalation email to the vendor."""
    if not settings.MAIL_ENABLED:
        logger.info(
            "\n"
            "=== ESCALATION EMAIL ===\n"
            "To: %s\n"
            "Subject: %s\n\n"
            "%s\n\n"
            "%s\n"
            "========================",
            to,
            email.subject,
            email.body,
            email.signature,
        )
        return

    logger.warning(
        "MAIL_ENABLED=True but SMTP transport is not configured. "
        "Falling back to console log for invoice %s.",
        email.invoice_eid,
    )
    logger.info("ESCALATION EMAIL (unsent): invoice=%s subject=%s", email.invoice_eid, email.subject)
