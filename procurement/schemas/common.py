"""Shared Pydantic schema bases with camelCase aliases, plus embedded reference models."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CamelModel(BaseModel):
    """All API schemas inherit from this to auto-generate camelCase aliases."""

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
        "from_attributes": True,
    }

    def columns(self, **dump_kwargs: Any) -> dict[str, Any]:
        """Dump for the ORM: python-mode values with enums unwrapped to their strings."""
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in self.model_dump(**dump_kwargs).items()
        }


class PatchModel(CamelModel):
    """Base for update bodies.

    Only fields present in the request are applied (`changes()`); a present
    field overwrites the stored value even when it is falsy. Fields listed in
    `required_fields` back NOT NULL columns, so an explicit null is rejected.
    """

    required_fields: ClassVar[tuple[str, ...]] = ()

    @field_validator("*", mode="after")
    @classmethod
    def _reject_null_for_required(cls, value: Any, info):
        if value is None and info.field_name in cls.required_fields:
            raise ValueError("Field cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        return self.columns(exclude_unset=True)


class UserRef(CamelModel):
    id: str
    email: str


class VendorRef(CamelModel):
    id: str
    name: str
    business_type: str
    email: str


class TenderRef(CamelModel):
    id: str
    title: str
    description: str
    estimated_value: float


class BidRef(CamelModel):
    id: str
    amount: float
    status: str


class InvoiceRef(CamelModel):
    id: str
    invoice_number: str
    amount: float


class HealthResponse(BaseModel):
    """Health-check response returned by /health."""
    status: str = "ok"
    app: str
    env: str
