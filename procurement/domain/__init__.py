"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  vendor.py        — Vendor (REFERENCE pattern for the other models)
  tender.py        — Tender
  bid.py           — Bid, unique per (tender, vendor)
  payment.py       — Payment, Invoice, PaymentSchedule
  notification.py  — Notification feed rows and IdempotencyKey
  user.py          — authentication identities
  audit.py         — Immutable audit trail (never updated or deleted)
  mixins.py        — IdMixin, TimestampMixin, SoftDeleteMixin
  enums.py         — status / category enumerations
"""

from procurement.domain.audit import AuditTrail
from procurement.domain.bid import Bid
from procurement.domain.notification import IdempotencyKey, Notification
from procurement.domain.payment import Invoice, Payment, PaymentSchedule
from procurement.domain.tender import Tender
from procurement.domain.user import User
from procurement.domain.vendor import Vendor

__all__ = [
    "AuditTrail",
    "Bid",
    "IdempotencyKey",
    "Invoice",
    "Notification",
    "Payment",
    "PaymentSchedule",
    "Tender",
    "User",
    "Vendor",
]
