"""Bid service: submission, listing and evaluation with per-vendor ownership."""


import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import PROCUREMENT_ROLES, Actor, ensure_vendor_access
from procurement.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from procurement.domain.bid import Bid
from procurement.domain.enums import BidStatus, BusinessType
from procurement.repositories.bid import BidRepository
from procurement.repositories.tender import TenderRepository
from procurement.repositories.vendor import VendorRepository
from procurement.schemas.bid import BidCreate, BidUpdate
from procurement.services.idempotency import IdempotencyService

logger = logging.getLogger(__name__)

_VENDOR_FIELDS = {"amount", "notes"}
_EVALUATION_FIELDS = {"status", "technical_score"}

class BidService:
    def __init__(self, session: AsyncSession, actor: Actor):
        self._actor = actor
        self._repo = BidRepository(session)
        self._tenders = TenderRepository(session)
        self._vendors = VendorRepository(session)
        self._idempotency = IdempotencyService(session, actor.user_id)

    async def get_bid(self, bid_id: str) -> Bid:
        bid = await self._repo.get_by_id(bid_id)
        if not bid:
            raise NotFoundError("Bid", bid_id)
        ensure_vendor_access(self._actor, bid.vendor_id)
        return bid

    async def _resolve_vendor_id(self, requested: str | None) -> str:
        if self._actor.is_vendor:
            if not self._actor.vendor_id:
                raise ValidationError("Vendor account not found")
            if requested and requested != self._actor.vendor_id:
                raise ForbiddenError("Vendors may only bid as themselves")
            return self._actor.vendor_id
        if not self._actor.has_role(PROCUREMENT_ROLES):
            raise ForbiddenError("Only vendors or procurement staff may submit bids")
        if not requested:
            raise ValidationError(
                "Vendor is required", fields=[{"field": "vendor", "message": "Field required"}]
            )
        return requested

    async def create_bid(self, data: BidCreate, idempotency_key: str | None = None) -> Bid:
        replayed = await self._idempotency.replay(idempotency_key, "bid")
        if replayed:
            return await self.get_bid(replayed)

        vendor_id = await self._resolve_vendor_id(data.vendor)
        tender = await self._tenders.get_by_id(data.tender)
        if not tender:
            raise NotFoundError("Tender", data.tender)
        vendor = await self._vendors.get_by_id(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor", vendor_id)
        if tender.is_reserved_for_mse and vendor.business_type != BusinessType.MSE.value:
            raise ForbiddenError("This tender is reserved for MSE vendors")

        # (tender, vendor) uniqueness is enforced by the storage constraint
        bid = await self._repo.create(
            tender_id=tender.id,
            vendor_id=vendor.id,
            amount=data.amount,
            notes=data.notes,
        )
        await self._idempotency.remember(idempotency_key, "bid", bid.id)
        logger.info("Bid %s submitted on tender %s by vendor %s", bid.id, tender.id, vendor.id)
        return bid

    async def list_for_tender(self, tender_id: str) -> list[Bid]:
        if not await self._tenders.exists(id=tender_id):
            raise NotFoundError("Tender", tender_id)
        if self._actor.is_vendor:
            # Competitors' bids stay hidden from vendors
            return await self._repo.find(tender_id=tender_id, vendor_id=self._actor.vendor_id or "")
        return await self._repo.find(tender_id=tender_id)

    async def list_for_vendor(self, vendor_id: str) -> list[Bid]:
        ensure_vendor_access(self._actor, vendor_id)
        return await self._repo.find(vendor_id=vendor_id)

    async def update_bid(self, bid_id: str, data: BidUpdate) -> Bid:
        bid = await self.get_bid(bid_id)
        changes = data.changes()

        if self._actor.is_vendor:
            blocked = changes.keys() - _VENDOR_FIELDS
            if blocked:
                raise ForbiddenError(
                    f"Only procurement staff may change: {', '.join(sorted(blocked))}"
                )
            if bid.status != BidStatus.SUBMITTED.value:
                raise ForbiddenError("Bid can no longer be changed by the vendor")
        elif not self._actor.has_role(PROCUREMENT_ROLES):
            raise ForbiddenError("Only procurement staff may evaluate bids")
        elif _EVALUATION_FIELDS & changes.keys():
            changes["evaluated_by_id"] = self._actor.user_id
            changes["evaluated_at"] = datetime.now(timezone.utc)

        if "status" in changes and changes["status"] != bid.status:
            logger.info("Bid %s status %s -> %s", bid.id, bid.status, changes["status"])
        return await self._repo.update(bid, **changes)
