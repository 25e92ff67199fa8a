"""Python client for the procurement API: HTTP wrapper, session context, forms and notification feed."""

from procurement.client.api import ApiClient, ApiError, RateLimitError
from procurement.client.context import ClientContext
from procurement.client.forms import InvoiceForm, PaymentForm, PaymentScheduleForm
from procurement.client.navigation import can_access, visible_navigation
from procurement.client.notifications import NotificationFeed

__all__ = [
    "ApiClient",
    "ApiError",
    "ClientContext",
    "InvoiceForm",
    "NotificationFeed",
    "PaymentForm",
    "PaymentScheduleForm",
    "RateLimitError",
    "can_access",
    "visible_navigation",
]
