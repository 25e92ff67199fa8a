"""Payment, invoice and payment-schedule services."""


import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor, ensure_vendor_access
from procurement.core.exceptions import NotFoundError, ValidationError
from procurement.core.pagination import PaginationParams
from procurement.domain.enums import PaymentStatus
from procurement.domain.payment import Invoice, Payment, PaymentSchedule
from procurement.repositories.bid import BidRepository
from procurement.repositories.payment import (
    InvoiceRepository,
    PaymentRepository,
    PaymentScheduleRepository,
)
from procurement.repositories.tender import TenderRepository
from procurement.repositories.vendor import VendorRepository
from procurement.schemas.payment import (
    InvoiceCreate,
    InvoiceUpdate,
    PaymentCreate,
    PaymentScheduleCreate,
    PaymentScheduleUpdate,
    PaymentUpdate,
)
from procurement.services.idempotency import IdempotencyService

logger = logging.getLogger(__name__)

class _FinanceService:
    def __init__(self, session: AsyncSession, actor: Actor):
        self._actor = actor
        self._vendors = VendorRepository(session)
        self._idempotency = IdempotencyService(session, actor.user_id)

    async def _require_vendor(self, vendor_id: str) -> None:
        if not await self._vendors.exists(id=vendor_id):
            raise NotFoundError("Vendor", vendor_id)


class PaymentService(_FinanceService):
    def __init__(self, session: AsyncSession, actor: Actor):
        super().__init__(session, actor)
        self._repo = PaymentRepository(session)
        self._invoices = InvoiceRepository(session)
        self._tenders = TenderRepository(session)
        self._bids = BidRepository(session)

    async def list_payments(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        vendor_id: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status, "vendor_id": vendor_id},
            search=pagination.search,
        )

    async def list_for_vendor(self, vendor_id: str) -> list[Payment]:
        ensure_vendor_access(self._actor, vendor_id)
        return await self._repo.find(vendor_id=vendor_id)

    async def get_payment(self, payment_id: str) -> Payment:
        payment = await self._repo.get_by_id(payment_id)
        if not payment:
            raise NotFoundError("Payment", payment_id)
        return payment

    async def create_payment(self, data: PaymentCreate, idempotency_key: str | None = None) -> Payment:
        replayed = await self._idempotency.replay(idempotency_key, "payment")
        if replayed:
            return await self.get_payment(replayed)

        vendor_id = data.vendor
        if data.invoice:
            invoice = await self._invoices.get_by_id(data.invoice)
            if not invoice:
                raise NotFoundError("Invoice", data.invoice)
            if vendor_id and vendor_id != invoice.vendor_id:
                raise ValidationError(
                    "Vendor does not match the invoice",
                    fields=[{"field": "vendor", "message": "Does not match the invoice's vendor"}],
                )
            vendor_id = invoice.vendor_id
        await self._require_vendor(vendor_id)
        if data.related_tender and not await self._tenders.exists(id=data.related_tender):
            raise NotFoundError("Tender", data.related_tender)
        if data.related_bid and not await self._bids.exists(id=data.related_bid):
            raise NotFoundError("Bid", data.related_bid)

        payment = await self._repo.create(
            vendor_id=vendor_id,
            invoice_id=data.invoice,
            amount=data.amount,
            payment_method=data.payment_method.value,
            notes=data.notes,
            transaction_id=data.transaction_id,
            related_tender_id=data.related_tender,
            related_bid_id=data.related_bid,
            processed_by_id=self._actor.user_id,
        )
        await self._idempotency.remember(idempotency_key, "payment", payment.id)
        logger.info("Payment %s of %.2f created for vendor %s", payment.id, payment.amount, vendor_id)
        return payment

    async def update_payment(self, payment_id: str, data: PaymentUpdate) -> Payment:
        payment = await self.get_payment(payment_id)
        changes = data.changes()
        if changes.get("status") == PaymentStatus.COMPLETED.value:
            changes["payment_date"] = datetime.now(timezone.utc)
        if "status" in changes and changes["status"] != payment.status:
            logger.info("Payment %s status %s -> %s", payment.id, payment.status, changes["status"])
        return await self._repo.update(payment, **changes)


class InvoiceService(_FinanceService):
    def __init__(self, session: AsyncSession, actor: Actor):
        super().__init__(session, actor)
        self._repo = InvoiceRepository(session)

    async def list_invoices(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        vendor_id: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status, "vendor_id": vendor_id},
            search=pagination.search,
        )

    async def get_invoice(self, invoice_id: str) -> Invoice:
        invoice = await self._repo.get_by_id(invoice_id)
        if not invoice:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    async def create_invoice(self, data: InvoiceCreate, idempotency_key: str | None = None) -> Invoice:
        replayed = await self._idempotency.replay(idempotency_key, "invoice")
        if replayed:
            return await self.get_invoice(replayed)

        await self._require_vendor(data.vendor)
        values = data.columns()
        values["vendor_id"] = values.pop("vendor")
        invoice = await self._repo.create(**values, created_by_id=self._actor.user_id)
        await self._idempotency.remember(idempotency_key, "invoice", invoice.id)
        logger.info("Invoice %s (%s) created", invoice.id, invoice.invoice_number)
        return invoice

    async def update_invoice(self, invoice_id: str, data: InvoiceUpdate) -> Invoice:
        invoice = await self.get_invoice(invoice_id)
        return await self._repo.update(invoice, **data.changes())


class PaymentScheduleService(_FinanceService):
    def __init__(self, session: AsyncSession, actor: Actor):
        super().__init__(session, actor)
        self._repo = PaymentScheduleRepository(session)

    async def list_schedules(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        vendor_id: str | None = None,
    ):
        # Upcoming first, regardless of the generic sort default
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by="schedule_date",
            order="asc",
            filters={"status": status, "vendor_id": vendor_id},
            search=pagination.search,
        )

    async def get_schedule(self, schedule_id: str) -> PaymentSchedule:
        schedule = await self._repo.get_by_id(schedule_id)
        if not schedule:
            raise NotFoundError("Payment schedule", schedule_id)
        return schedule

    async def create_schedule(
        self, data: PaymentScheduleCreate, idempotency_key: str | None = None
    ) -> PaymentSchedule:
        replayed = await self._idempotency.replay(idempotency_key, "payment_schedule")
        if replayed:
            return await self.get_schedule(replayed)

        await self._require_vendor(data.vendor)
        values = data.columns()
        values["vendor_id"] = values.pop("vendor")
        schedule = await self._repo.create(**values, created_by_id=self._actor.user_id)
        await self._idempotency.remember(idempotency_key, "payment_schedule", schedule.id)
        logger.info("Payment schedule %s created for vendor %s", schedule.id, schedule.vendor_id)
        return schedule

    async def update_schedule(self, schedule_id: str, data: PaymentScheduleUpdate) -> PaymentSchedule:
        schedule = await self.get_schedule(schedule_id)
        return await self._repo.update(schedule, **data.changes())
