"""Vendor Pydantic schemas (request DTOs and response models)."""


from datetime import datetime

from pydantic import Field

from procurement.domain.enums import BusinessType, VendorStatus
from procurement.schemas.common import EMAIL_PATTERN, CamelModel, PatchModel, UserRef

class BankDetails(CamelModel):
    account_name: str | None = None
    account_number: str | None = None
    bank_name: str | None = None
    ifsc_code: str | None = None

class VendorCreate(CamelModel):
    """Registration body. `status` and `complianceScore` are not accepted here."""

    name: str = Field(min_length=1)
    business_type: BusinessType
    contact_person: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    mse_certificate: str | None = None
    bank_details: BankDetails | None = None

class VendorUpdate(PatchModel):
    required_fields = (
        "name", "business_type", "contact_person", "email", "phone", "address",
        "status", "compliance_score",
    )

    name: str | None = None
    business_type: BusinessType | None = None
    contact_person: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    phone: str | None = None
    address: str | None = None
    mse_certificate: str | None = None
    bank_details: BankDetails | None = None
    # Staff-only fields
    status: VendorStatus | None = None
    compliance_score: float | None = Field(default=None, ge=0, le=100)

class VendorOut(CamelModel):
    id: str
    name: str
    business_type: str
    contact_person: str
    email: str
    phone: str
    address: str
    mse_certificate: str | None = None
    status: str
    compliance_score: float
    bank_details: BankDetails | None = None
    user_id: str
    user: UserRef | None = None
    created_at: datetime
    updated_at: datetime
