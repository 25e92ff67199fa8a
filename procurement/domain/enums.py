"""Enumerated status and category values shared by models and schemas."""

from enum import Enum


class BusinessType(str, Enum):
    MSE = "MSE"
    LARGE_ENTERPRISE = "Large Enterprise"


class VendorStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    SUSPENDED = "Suspended"


class TenderStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    UNDER_REVIEW = "under_review"
    AWARDED = "awarded"
    CANCELLED = "cancelled"


class TenderCategory(str, Enum):
    GOODS = "goods"
    SERVICES = "services"
    WORKS = "works"


class BidStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CREDIT_CARD = "credit_card"


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    REJECTED = "rejected"


class ScheduleFrequency(str, Enum):
    ONE_TIME = "one_time"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class ScheduleStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    VENDOR_APPROVAL = "vendor_approval"
    VENDOR_STATUS = "vendor_status"
    TENDER_STATUS = "tender_status"
    BID_STATUS = "bid_status"
    TECHNICAL_SCORE = "technical_score"
    PAYMENT_STATUS = "payment_status"
    GENERAL = "general"
