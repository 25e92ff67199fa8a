"""Tender router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.auth import get_current_actor, idempotency_key, require_procurement
from procurement.core.pagination import PaginationParams
from procurement.core.response import DataResponse, ListResponse, paginated
from procurement.db.base import get_db
from procurement.domain.enums import TenderCategory, TenderStatus
from procurement.schemas.tender import TenderCreate, TenderOut, TenderUpdate
from procurement.services.tender import TenderService

router = APIRouter(prefix="/tenders", tags=["Tenders"])


@router.get("", response_model=ListResponse[TenderOut])
async def list_tenders(
    filter_status: Optional[TenderStatus] = Query(default=None, alias="status"),
    category: Optional[TenderCategory] = Query(default=None),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    """List tenders (paginated). Filter by ?status= and ?category=, search title/description."""
    items, total = await TenderService(session, actor).list_tenders(
        pagination,
        status=filter_status.value if filter_status else None,
        category=category.value if category else None,
    )
    return paginated(
        [TenderOut.model_validate(t) for t in items],
        total, pagination,
    )


@router.post("", response_model=DataResponse[TenderOut], status_code=status.HTTP_201_CREATED)
async def create_tender(
    body: TenderCreate,
    key: Optional[str] = Depends(idempotency_key),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_procurement),
):
    tender = await TenderService(session, actor).create_tender(body, idempotency_key=key)
    return {"data": TenderOut.model_validate(tender)}


@router.get("/{tender_id}", response_model=DataResponse[TenderOut])
async def get_tender(
    tender_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    tender = await TenderService(session, actor).get_tender(tender_id)
    return {"data": TenderOut.model_validate(tender)}


@router.put("/{tender_id}", response_model=DataResponse[TenderOut])
async def update_tender(
    tender_id: str,
    body: TenderUpdate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_procurement),
):
    tender = await TenderService(session, actor).update_tender(tender_id, body)
    return {"data": TenderOut.model_validate(tender)}


@router.delete("/{tender_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tender(
    tender_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_procurement),
):
    """Soft-delete a tender; its bids are withdrawn with it."""
    await TenderService(session, actor).delete_tender(tender_id)
