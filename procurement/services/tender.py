"""Tender service."""


import logging

from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.exceptions import ConflictError, NotFoundError
from procurement.core.pagination import PaginationParams
from procurement.domain.tender import Tender
from procurement.repositories.bid import BidRepository
from procurement.repositories.payment import PaymentRepository
from procurement.repositories.tender import TenderRepository
from procurement.schemas.tender import TenderCreate, TenderUpdate
from procurement.services.idempotency import IdempotencyService

logger = logging.getLogger(__name__)

class TenderService:
    def __init__(self, session: AsyncSession, actor: Actor):
        self._actor = actor
        self._repo = TenderRepository(session)
        self._bids = BidRepository(session)
        self._payments = PaymentRepository(session)
        self._idempotency = IdempotencyService(session, actor.user_id)

    async def list_tenders(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        category: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status, "category": category},
            search=pagination.search,
        )

    async def get_tender(self, tender_id: str) -> Tender:
        tender = await self._repo.get_by_id(tender_id)
        if not tender:
            raise NotFoundError("Tender", tender_id)
        return tender

    async def create_tender(self, data: TenderCreate, idempotency_key: str | None = None) -> Tender:
        replayed = await self._idempotency.replay(idempotency_key, "tender")
        if replayed:
            return await self.get_tender(replayed)

        tender = await self._repo.create(
            **data.columns(), created_by_id=self._actor.user_id
        )
        await self._idempotency.remember(idempotency_key, "tender", tender.id)
        logger.info("Tender %s created by %s", tender.id, self._actor.email)
        return tender

    async def update_tender(self, tender_id: str, data: TenderUpdate) -> Tender:
        tender = await self.get_tender(tender_id)
        changes = data.changes()
        if "status" in changes and changes["status"] != tender.status:
            logger.info("Tender %s status %s -> %s", tender.id, tender.status, changes["status"])
        return await self._repo.update(tender, **changes)

    async def delete_tender(self, tender_id: str) -> None:
        """Soft-delete the tender and withdraw its bids; payments block the delete."""
        tender = await self.get_tender(tender_id)
        if await self._payments.exists_for_tender(tender.id):
            raise ConflictError("Tender has payments on record and cannot be deleted")

        cascaded = await self._bids.soft_delete_where(tender_id=tender.id)
        await self._repo.soft_delete(tender.id)
        logger.info("Tender %s deleted (%d bids withdrawn)", tender.id, cascaded)
