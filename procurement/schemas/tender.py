"""Tender Pydantic schemas."""


from datetime import datetime

from pydantic import Field

from procurement.domain.enums import TenderCategory, TenderStatus
from procurement.schemas.common import CamelModel, PatchModel, UserRef

class TenderCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    estimated_value: float = Field(gt=0)
    submission_deadline: datetime
    category: TenderCategory
    is_reserved_for_mse: bool = Field(default=False, alias="isReservedForMSE")

class TenderUpdate(PatchModel):
    required_fields = (
        "title", "description", "estimated_value", "submission_deadline",
        "status", "category", "is_reserved_for_mse",
    )

    title: str | None = None
    description: str | None = None
    estimated_value: float | None = Field(default=None, gt=0)
    submission_deadline: datetime | None = None
    status: TenderStatus | None = None
    category: TenderCategory | None = None
    is_reserved_for_mse: bool | None = Field(default=None, alias="isReservedForMSE")

class TenderOut(CamelModel):
    id: str
    title: str
    description: str
    estimated_value: float
    submission_deadline: datetime
    status: str
    category: str
    is_reserved_for_mse: bool = Field(alias="isReservedForMSE")
    created_by_id: str
    created_by: UserRef | None = None
    created_at: datetime
    updated_at: datetime
