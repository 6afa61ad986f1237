from freightdesk.models.truck import Truck
from freightdesk.models.vendor import Vendor
from freightdesk.models.invoice import Invoice
from freightdesk.models.email_template import EmailTemplate

__all__ = [
    "Truck",
    "Vendor",
    "Invoice",
    "EmailTemplate",
]
