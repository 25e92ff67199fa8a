"""Bid router. Ownership is checked in BidService, not here."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.auth import get_current_actor, idempotency_key
from procurement.core.response import DataResponse, ItemsResponse
from procurement.db.base import get_db
from procurement.schemas.bid import BidCreate, BidOut, BidUpdate
from procurement.services.bid import BidService

router = APIRouter(prefix="/bids", tags=["Bids"])


@router.post("", response_model=DataResponse[BidOut], status_code=status.HTTP_201_CREATED)
async def create_bid(
    body: BidCreate,
    key: Optional[str] = Depends(idempotency_key),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    bid = await BidService(session, actor).create_bid(body, idempotency_key=key)
    return {"data": BidOut.model_validate(bid)}


@router.get("/tender/{tender_id}", response_model=ItemsResponse[BidOut])
async def list_bids_for_tender(
    tender_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    bids = await BidService(session, actor).list_for_tender(tender_id)
    return {"data": [BidOut.model_validate(b) for b in bids]}


@router.get("/vendor/{vendor_id}", response_model=ItemsResponse[BidOut])
async def list_bids_for_vendor(
    vendor_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    bids = await BidService(session, actor).list_for_vendor(vendor_id)
    return {"data": [BidOut.model_validate(b) for b in bids]}


@router.get("/{bid_id}", response_model=DataResponse[BidOut])
async def get_bid(
    bid_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    bid = await BidService(session, actor).get_bid(bid_id)
    return {"data": BidOut.model_validate(bid)}


@router.put("/{bid_id}", response_model=DataResponse[BidOut])
async def update_bid(
    bid_id: str,
    body: BidUpdate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    """Procurement staff evaluate (status, technicalScore); the owning vendor may revise amount/notes."""
    bid = await BidService(session, actor).update_bid(bid_id, body)
    return {"data": BidOut.model_validate(bid)}
