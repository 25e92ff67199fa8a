"""Vendor service.

Services take the session and the acting Actor, talk to repositories only, and
raise AppException subclasses for rule violations. Every other service in this
package follows the same shape.
"""


import logging

from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import PROCUREMENT_ROLES, Actor, ensure_vendor_access
from procurement.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from procurement.core.pagination import PaginationParams
from procurement.domain.enums import BusinessType
from procurement.domain.vendor import Vendor
from procurement.repositories.bid import BidRepository
from procurement.repositories.payment import (
    InvoiceRepository,
    PaymentRepository,
    PaymentScheduleRepository,
)
from procurement.repositories.vendor import VendorRepository
from procurement.schemas.vendor import VendorCreate, VendorUpdate
from procurement.services.idempotency import IdempotencyService

logger = logging.getLogger(__name__)

# Fields only procurement staff may change on a vendor record
_STAFF_ONLY_FIELDS = {"status", "compliance_score"}

class VendorService:
    def __init__(self, session: AsyncSession, actor: Actor):
        self._actor = actor
        self._repo = VendorRepository(session)
        self._bids = BidRepository(session)
        self._payments = PaymentRepository(session)
        self._invoices = InvoiceRepository(session)
        self._schedules = PaymentScheduleRepository(session)
        self._idempotency = IdempotencyService(session, actor.user_id)

    async def list_vendors(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        business_type: str | None = None,
    ):
        filters = {"status": status, "business_type": business_type}
        if self._actor.is_vendor:
            # A vendor only ever sees its own record in listings
            if self._actor.vendor_id is None:
                return [], 0
            filters["id"] = self._actor.vendor_id
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters=filters,
            search=pagination.search,
        )

    async def list_mse_vendors(self, pagination: PaginationParams, status: str | None = None):
        return await self.list_vendors(pagination, status=status, business_type=BusinessType.MSE.value)

    async def get_vendor(self, vendor_id: str) -> Vendor:
        vendor = await self._load(vendor_id)
        ensure_vendor_access(self._actor, vendor.id)
        return vendor

    async def _load(self, vendor_id: str) -> Vendor:
        vendor = await self._repo.get_by_id(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor", vendor_id)
        return vendor

    async def create_vendor(self, data: VendorCreate, idempotency_key: str | None = None) -> Vendor:
        replayed = await self._idempotency.replay(idempotency_key, "vendor")
        if replayed:
            return await self._load(replayed)

        # status / compliance_score are never taken from the request
        vendor = await self._repo.create(
            **data.columns(exclude_none=True),
            user_id=self._actor.user_id,
        )
        await self._idempotency.remember(idempotency_key, "vendor", vendor.id)
        logger.info("Vendor %s registered by user %s", vendor.id, self._actor.user_id)
        return vendor

    async def update_vendor(self, vendor_id: str, data: VendorUpdate) -> Vendor:
        vendor = await self._load(vendor_id)
        changes = data.changes()

        if self._actor.is_vendor:
            ensure_vendor_access(self._actor, vendor.id)
            blocked = _STAFF_ONLY_FIELDS & changes.keys()
            if blocked:
                raise ForbiddenError(
                    f"Only procurement staff may change: {', '.join(sorted(blocked))}"
                )
        elif not self._actor.has_role(PROCUREMENT_ROLES):
            raise ForbiddenError("Only procurement staff or the vendor itself may update a vendor")

        if "status" in changes and changes["status"] != vendor.status:
            logger.info("Vendor %s status %s -> %s", vendor.id, vendor.status, changes["status"])
        return await self._repo.update(vendor, **changes)

    async def delete_vendor(self, vendor_id: str) -> None:
        vendor = await self._load(vendor_id)
        for repo, label in (
            (self._payments, "payments"),
            (self._invoices, "invoices"),
            (self._schedules, "payment schedules"),
        ):
            if await repo.exists(vendor_id=vendor.id):
                raise ConflictError(f"Vendor has {label} on record and cannot be deleted")

        cascaded = await self._bids.soft_delete_where(vendor_id=vendor.id)
        await self._repo.soft_delete(vendor.id)
        logger.info("Vendor %s deleted (%d bids withdrawn)", vendor.id, cascaded)
