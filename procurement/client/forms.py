"""Client-side forms for invoices, payments and payment schedules.

Each form keeps its own values, touched fields and errors. `blur()` validates
and reveals the error for one field; `submit()` validates everything and, if
clean, performs exactly one API write carrying the form's idempotency key.
Success resets the form (and rotates the key); failure is logged, handed to
`on_error`, and leaves values and key untouched so a retry is deduplicated by
the server.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date
from typing import Any, Callable, ClassVar

import requests
from pydantic import BaseModel, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from procurement.client.api import ApiError
from procurement.client.context import ClientContext
from procurement.domain.enums import PaymentMethod, ScheduleFrequency

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation schemas
# ---------------------------------------------------------------------------

class FormSchema(BaseModel):
    """Blank strings count as missing; required fields report their own message."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    required_messages: ClassVar[dict[str, str]] = {}
    invalid_messages: ClassVar[dict[str, str]] = {}

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any, info):
        if value is None or (isinstance(value, str) and not value.strip()):
            message = cls.required_messages.get(info.field_name)
            if message:
                raise PydanticCustomError("required", message)
            return None
        return value

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _positive(label: str, value: float) -> float:
    if value <= 0:
        raise PydanticCustomError("positive", f"{label} must be positive")
    return value


def _future(label: str, value: date) -> date:
    if value <= date.today():
        raise PydanticCustomError("future", f"{label} must be in the future")
    return value


class InvoiceSchema(FormSchema):
    required_messages = {
        "vendor": "Vendor is required",
        "amount": "Amount is required",
        "description": "Description is required",
        "invoice_number": "Invoice number is required",
        "due_date": "Due date is required",
    }
    invalid_messages = {"amount": "Amount must be a number", "due_date": "Due date must be a valid date"}

    vendor: str
    amount: float
    description: str
    invoice_number: str
    due_date: date

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: float) -> float:
        return _positive("Amount", value)

    @field_validator("due_date")
    @classmethod
    def _due_date(cls, value: date) -> date:
        return _future("Due date", value)


class PaymentSchema(FormSchema):
    required_messages = {
        "invoice": "Invoice is required",
        "amount": "Amount is required",
        "payment_method": "Payment method is required",
    }
    invalid_messages = {
        "amount": "Amount must be a number",
        "payment_method": "Select a valid payment method",
    }

    invoice: str
    amount: float
    payment_method: PaymentMethod
    notes: str | None = None

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: float) -> float:
        return _positive("Amount", value)


class PaymentScheduleSchema(FormSchema):
    required_messages = {
        "vendor": "Vendor is required",
        "amount": "Amount is required",
        "schedule_date": "Schedule date is required",
        "frequency": "Frequency is required",
    }
    invalid_messages = {
        "amount": "Amount must be a number",
        "schedule_date": "Schedule date must be a valid date",
        "frequency": "Select a valid frequency",
    }

    vendor: str
    amount: float
    schedule_date: date
    frequency: ScheduleFrequency
    description: str | None = None

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: float) -> float:
        return _positive("Amount", value)

    @field_validator("schedule_date")
    @classmethod
    def _schedule_date(cls, value: date) -> date:
        return _future("Schedule date", value)


# ---------------------------------------------------------------------------
# Form state
# ---------------------------------------------------------------------------

_CUSTOM_ERRORS = {"required", "positive", "future"}


def _new_key() -> str:
    return str(uuid.uuid4())


class Form:
    schema: ClassVar[type[FormSchema]]
    action: ClassVar[str]

    def __init__(
        self,
        context: ClientContext,
        on_success: Callable[[dict], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self.context = context
        self.on_success = on_success
        self.on_error = on_error
        self._submit_lock = threading.Lock()
        self.reset()

    @classmethod
    def initial_values(cls) -> dict[str, Any]:
        return {name: "" for name in cls.schema.model_fields}

    # ------------------------------------------------------------------
    # Field state
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.values: dict[str, Any] = self.initial_values()
        self.touched: set[str] = set()
        self.errors: dict[str, str] = {}
        self.submit_error: Exception | None = None
        self.idempotency_key = _new_key()

    def set_value(self, field: str, value: Any) -> None:
        if field not in self.values:
            raise KeyError(f"{type(self).__name__} has no field {field!r}")
        self.values[field] = value
        if field in self.touched:
            self._validate()

    def blur(self, field: str) -> str | None:
        """Mark a field touched and return its error, if any."""
        if field not in self.values:
            raise KeyError(f"{type(self).__name__} has no field {field!r}")
        self.touched.add(field)
        self._validate()
        return self.errors.get(field)

    @property
    def visible_errors(self) -> dict[str, str]:
        return {f: msg for f, msg in self.errors.items() if f in self.touched}

    @property
    def is_submitting(self) -> bool:
        return self._submit_lock.locked()

    def validate(self) -> bool:
        self.touched.update(self.values)
        return self._validate() is not None

    def _validate(self) -> FormSchema | None:
        try:
            parsed = self.schema.model_validate(self.values)
        except ValidationError as exc:
            self.errors = {}
            for err in exc.errors():
                field = str(err["loc"][0]) if err["loc"] else "form"
                if err["type"] in _CUSTOM_ERRORS:
                    message = err["msg"]
                else:
                    message = self.schema.invalid_messages.get(field, err["msg"])
                self.errors.setdefault(field, message)
            return None
        self.errors = {}
        return parsed

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self) -> dict | None:
        """Validate and send; returns the created record, or None when nothing was created."""
        if not self._submit_lock.acquire(blocking=False):
            logger.debug("%s already in flight; ignoring submit", self.action)
            return None
        try:
            if not self.validate():
                return None
            parsed = self.schema.model_validate(self.values)
            try:
                record = self._send(parsed.payload(), self.idempotency_key)
            except (ApiError, requests.RequestException) as exc:
                logger.error("Error %s: %s", self.action, exc)
                self.submit_error = exc
                if self.on_error:
                    self.on_error(exc)
                return None
        finally:
            self._submit_lock.release()

        self.reset()
        if self.on_success:
            self.on_success(record)
        return record

    def _send(self, payload: dict, idempotency_key: str) -> dict:
        raise NotImplementedError


class InvoiceForm(Form):
    schema = InvoiceSchema
    action = "creating invoice"

    def _send(self, payload: dict, idempotency_key: str) -> dict:
        return self.context.api.create_invoice(payload, idempotency_key)


class PaymentForm(Form):
    schema = PaymentSchema
    action = "processing payment"

    def _send(self, payload: dict, idempotency_key: str) -> dict:
        return self.context.api.process_payment(payload, idempotency_key)


class PaymentScheduleForm(Form):
    schema = PaymentScheduleSchema
    action = "creating payment schedule"

    def _send(self, payload: dict, idempotency_key: str) -> dict:
        return self.context.api.create_payment_schedule(payload, idempotency_key)
