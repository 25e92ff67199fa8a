"""Bid Pydantic schemas."""


from datetime import datetime

from pydantic import Field

from procurement.domain.enums import BidStatus
from procurement.schemas.common import CamelModel, PatchModel, TenderRef, VendorRef

class BidCreate(CamelModel):
    tender: str = Field(min_length=1)
    # Vendors bid as themselves; staff must name the vendor
    vendor: str | None = None
    amount: float = Field(gt=0)
    notes: str | None = None

class BidUpdate(PatchModel):
    required_fields = ("amount", "status")

    # Owning vendor, while the bid is still "submitted"
    amount: float | None = Field(default=None, gt=0)
    notes: str | None = None
    # Procurement evaluation
    status: BidStatus | None = None
    technical_score: float | None = Field(default=None, ge=0, le=100)

class BidOut(CamelModel):
    id: str
    tender_id: str
    vendor_id: str
    amount: float
    status: str
    technical_score: float | None = None
    notes: str | None = None
    evaluated_by_id: str | None = None
    evaluated_at: datetime | None = None
    tender: TenderRef | None = None
    vendor: VendorRef | None = None
    created_at: datetime
    updated_at: datetime
