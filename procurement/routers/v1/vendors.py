"""Vendor CRUD router — REFERENCE pattern for all routers.

Pattern:
  1. Declare a router with prefix and tags
  2. Inject DB session + current actor via Depends (role gates via require_*)
  3. Instantiate the service with (session, actor)
  4. Call service methods and wrap result in response envelope
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.auth import get_current_actor, idempotency_key, require_admin
from procurement.core.pagination import PaginationParams
from procurement.core.response import DataResponse, ListResponse, paginated
from procurement.db.base import get_db
from procurement.domain.enums import BusinessType, VendorStatus
from procurement.schemas.vendor import VendorCreate, VendorOut, VendorUpdate
from procurement.services.vendor import VendorService

router = APIRouter(prefix="/vendors", tags=["Vendors"])


def _page(items, total, pagination: PaginationParams) -> dict:
    return paginated(
        [VendorOut.model_validate(v) for v in items],
        total, pagination,
    )


@router.get("", response_model=ListResponse[VendorOut])
async def list_vendors(
    filter_status: Optional[VendorStatus] = Query(default=None, alias="status"),
    business_type: Optional[BusinessType] = Query(default=None, alias="businessType"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    """List vendors (paginated). Filter by ?status= and ?businessType=, search name/email."""
    items, total = await VendorService(session, actor).list_vendors(
        pagination,
        status=filter_status.value if filter_status else None,
        business_type=business_type.value if business_type else None,
    )
    return _page(items, total, pagination)


@router.get("/mse", response_model=ListResponse[VendorOut])
async def list_mse_vendors(
    filter_status: Optional[VendorStatus] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    items, total = await VendorService(session, actor).list_mse_vendors(
        pagination, status=filter_status.value if filter_status else None,
    )
    return _page(items, total, pagination)


@router.post("", response_model=DataResponse[VendorOut], status_code=status.HTTP_201_CREATED)
async def create_vendor(
    body: VendorCreate,
    key: Optional[str] = Depends(idempotency_key),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    """Register the caller's vendor account. Starts Pending with a compliance score of 0."""
    vendor = await VendorService(session, actor).create_vendor(body, idempotency_key=key)
    return {"data": VendorOut.model_validate(vendor)}


@router.get("/{vendor_id}", response_model=DataResponse[VendorOut])
async def get_vendor(
    vendor_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    vendor = await VendorService(session, actor).get_vendor(vendor_id)
    return {"data": VendorOut.model_validate(vendor)}


@router.put("/{vendor_id}", response_model=DataResponse[VendorOut])
async def update_vendor(
    vendor_id: str,
    body: VendorUpdate,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(get_current_actor),
):
    vendor = await VendorService(session, actor).update_vendor(vendor_id, body)
    return {"data": VendorOut.model_validate(vendor)}


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor(
    vendor_id: str,
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_admin),
):
    await VendorService(session, actor).delete_vendor(vendor_id)
