"""Payment, invoice and payment-schedule routers (finance roles)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.auth import get_current_actor, idempotency_key, require_finance
from procurement.core.pagination import PaginationParams
from procurement.core.response import DataResponse, ItemsResponse, ListResponse, paginated
from procurement.db.base import get_db
from procurement.domain.enums import InvoiceStatus, PaymentStatus, ScheduleStatus
from procurement.schemas.payment import (
    InvoiceCreate,
    InvoiceOut,
    InvoiceUpdate,
    PaymentCreate,
    PaymentOut,
    PaymentScheduleCreate,
    PaymentScheduleOut,
    PaymentScheduleUpdate,
    PaymentUpdate,
)
from procurement.services.payment import InvoiceService, PaymentScheduleService, PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])
invoices_router = APIRouter(prefix="/invoices", tags=["Invoices"])
schedules_router = APIRouter(prefix="/payment-schedules", tags=["Payment Schedules"])


# ------------------------------------------------------------------
# Payments
# ------------------------------------------------------------------

@router.post("", response_model=DataResponse[PaymentOut], status_code=status.HTTP_201_CREATED)
async def create_payment(
    body: PaymentCreate,
    key: Optional[str] = Depends(idempotency_key),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    payment = await PaymentService(session, actor).create_payment(body, idempotency_key=key)
    return {"data": PaymentOut.model_validate(payment)}


@router.get("", response_model=ListResponse[PaymentOut])
async def list_payments(
    filter_status: Optional[PaymentStatus] = Query(default=None, alias="status"),
    vendor: Optional[str] = Query(default=None),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    items, total = await PaymentService(session, actor).list_payments(
        pagination, status=filter_status.value if filter_status else None, vendor_id=vendor,
    )
    return paginated(
        [PaymentOut.model_validate(p) for p in items],
        total, pagination,
    )


@router.get("/vendor/{vendor_id}", response_model=ItemsResponse[PaymentOut])
async def list_payments_for_vendor(
    vendor_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    payments = await PaymentService(session, actor).list_for_vendor(vendor_id)
    return {"data": [PaymentOut.model_validate(p) for p in payments]}


@router.get("/{payment_id}", response_model=DataResponse[PaymentOut])
async def get_payment(
    payment_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    payment = await PaymentService(session, actor).get_payment(payment_id)
    return {"data": PaymentOut.model_validate(payment)}


@router.put("/{payment_id}", response_model=DataResponse[PaymentOut])
async def update_payment(
    payment_id: str,
    body: PaymentUpdate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    """Setting status to `completed` stamps paymentDate with the time of this update."""
    payment = await PaymentService(session, actor).update_payment(payment_id, body)
    return {"data": PaymentOut.model_validate(payment)}


# ------------------------------------------------------------------
# Invoices
# ------------------------------------------------------------------

@invoices_router.post("", response_model=DataResponse[InvoiceOut], status_code=status.HTTP_201_CREATED)
async def create_invoice(
    body: InvoiceCreate,
    key: Optional[str] = Depends(idempotency_key),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    invoice = await InvoiceService(session, actor).create_invoice(body, idempotency_key=key)
    return {"data": InvoiceOut.model_validate(invoice)}


@invoices_router.get("", response_model=ListResponse[InvoiceOut])
async def list_invoices(
    filter_status: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    vendor: Optional[str] = Query(default=None),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    items, total = await InvoiceService(session, actor).list_invoices(
        pagination, status=filter_status.value if filter_status else None, vendor_id=vendor,
    )
    return paginated(
        [InvoiceOut.model_validate(i) for i in items],
        total, pagination,
    )


@invoices_router.get("/{invoice_id}", response_model=DataResponse[InvoiceOut])
async def get_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    invoice = await InvoiceService(session, actor).get_invoice(invoice_id)
    return {"data": InvoiceOut.model_validate(invoice)}


@invoices_router.put("/{invoice_id}", response_model=DataResponse[InvoiceOut])
async def update_invoice(
    invoice_id: str,
    body: InvoiceUpdate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    invoice = await InvoiceService(session, actor).update_invoice(invoice_id, body)
    return {"data": InvoiceOut.model_validate(invoice)}


# ------------------------------------------------------------------
# Payment schedules
# ------------------------------------------------------------------

@schedules_router.post(
    "", response_model=DataResponse[PaymentScheduleOut], status_code=status.HTTP_201_CREATED
)
async def create_schedule(
    body: PaymentScheduleCreate,
    key: Optional[str] = Depends(idempotency_key),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    schedule = await PaymentScheduleService(session, actor).create_schedule(body, idempotency_key=key)
    return {"data": PaymentScheduleOut.model_validate(schedule)}


@schedules_router.get("", response_model=ListResponse[PaymentScheduleOut])
async def list_schedules(
    filter_status: Optional[ScheduleStatus] = Query(default=None, alias="status"),
    vendor: Optional[str] = Query(default=None),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    """Schedules ordered by scheduleDate, soonest first."""
    items, total = await PaymentScheduleService(session, actor).list_schedules(
        pagination, status=filter_status.value if filter_status else None, vendor_id=vendor,
    )
    return paginated(
        [PaymentScheduleOut.model_validate(s) for s in items],
        total, pagination,
    )


@schedules_router.get("/{schedule_id}", response_model=DataResponse[PaymentScheduleOut])
async def get_schedule(
    schedule_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    schedule = await PaymentScheduleService(session, actor).get_schedule(schedule_id)
    return {"data": PaymentScheduleOut.model_validate(schedule)}


@schedules_router.put("/{schedule_id}", response_model=DataResponse[PaymentScheduleOut])
async def update_schedule(
    schedule_id: str,
    body: PaymentScheduleUpdate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_finance),
):
    schedule = await PaymentScheduleService(session, actor).update_schedule(schedule_id, body)
    return {"data": PaymentScheduleOut.model_validate(schedule)}
