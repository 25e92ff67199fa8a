"""Payment, Invoice and Payment Schedule Pydantic schemas."""


from datetime import date, datetime

from pydantic import Field, model_validator

from procurement.domain.enums import (
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    ScheduleFrequency,
    ScheduleStatus,
)
from procurement.schemas.common import (
    BidRef,
    CamelModel,
    InvoiceRef,
    PatchModel,
    TenderRef,
    UserRef,
    VendorRef,
)

# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

class PaymentCreate(CamelModel):
    vendor: str | None = None
    invoice: str | None = None
    amount: float = Field(gt=0)
    payment_method: PaymentMethod
    notes: str | None = None
    transaction_id: str | None = None
    related_tender: str | None = None
    related_bid: str | None = None

    @model_validator(mode="after")
    def _vendor_or_invoice(self):
        if not self.vendor and not self.invoice:
            raise ValueError("Either vendor or invoice is required")
        return self

class PaymentUpdate(PatchModel):
    required_fields = ("status",)

    status: PaymentStatus | None = None
    notes: str | None = None
    transaction_id: str | None = None

class PaymentOut(CamelModel):
    id: str
    vendor_id: str
    amount: float
    status: str
    payment_method: str
    notes: str | None = None
    transaction_id: str | None = None
    payment_date: datetime | None = None
    processed_by_id: str
    related_tender_id: str | None = None
    related_bid_id: str | None = None
    invoice_id: str | None = None
    vendor: VendorRef | None = None
    processed_by: UserRef | None = None
    related_tender: TenderRef | None = None
    related_bid: BidRef | None = None
    invoice: InvoiceRef | None = None
    created_at: datetime
    updated_at: datetime

# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

class InvoiceCreate(CamelModel):
    vendor: str = Field(min_length=1)
    invoice_number: str = Field(min_length=1)
    amount: float = Field(gt=0)
    description: str = Field(min_length=1)
    due_date: date

class InvoiceUpdate(PatchModel):
    required_fields = ("status",)

    status: InvoiceStatus | None = None

class InvoiceOut(CamelModel):
    id: str
    vendor_id: str
    invoice_number: str
    amount: float
    description: str
    due_date: date
    status: str
    created_by_id: str
    vendor: VendorRef | None = None
    created_at: datetime
    updated_at: datetime

# ---------------------------------------------------------------------------
# Payment schedules
# ---------------------------------------------------------------------------

class PaymentScheduleCreate(CamelModel):
    vendor: str = Field(min_length=1)
    amount: float = Field(gt=0)
    schedule_date: date
    frequency: ScheduleFrequency
    description: str | None = None

class PaymentScheduleUpdate(PatchModel):
    required_fields = ("status",)

    status: ScheduleStatus | None = None
    description: str | None = None

class PaymentScheduleOut(CamelModel):
    id: str
    vendor_id: str
    amount: float
    schedule_date: date
    frequency: str
    description: str | None = None
    status: str
    created_by_id: str
    vendor: VendorRef | None = None
    created_at: datetime
    updated_at: datetime
