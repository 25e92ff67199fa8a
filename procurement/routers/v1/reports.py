"""Report router: read-only procurement, vendor and payment reports and dashboard metrics."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.auth import require_procurement
from procurement.core.response import DataResponse, ItemsResponse
from procurement.db.base import get_db
from procurement.domain.enums import BusinessType, PaymentStatus, TenderStatus, VendorStatus
from procurement.schemas.payment import PaymentOut
from procurement.schemas.report import (
    DashboardMetrics,
    TenderBidSummary,
    TenderReport,
    VendorBidSummary,
    VendorReport,
)
from procurement.services.report import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/procurement", response_model=ItemsResponse[TenderReport])
async def procurement_report(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    filter_status: Optional[TenderStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_procurement),
):
    """Tenders created between ?startDate= and ?endDate= (inclusive), with their bids."""
    rows = await ReportService(session, actor).procurement_report(
        start_date, end_date, status=filter_status.value if filter_status else None,
    )
    return {
        "data": [
            TenderReport.model_validate(tender).model_copy(
                update={"bids": [TenderBidSummary.model_validate(b) for b in bids]}
            )
            for tender, bids in rows
        ]
    }


@router.get("/vendors", response_model=ItemsResponse[VendorReport])
async def vendor_report(
    business_type: Optional[BusinessType] = Query(default=None, alias="businessType"),
    filter_status: Optional[VendorStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_procurement),
):
    rows = await ReportService(session, actor).vendor_report(
        business_type=business_type.value if business_type else None,
        status=filter_status.value if filter_status else None,
    )
    return {
        "data": [
            VendorReport.model_validate(vendor).model_copy(
                update={"bids": [VendorBidSummary.model_validate(b) for b in bids]}
            )
            for vendor, bids in rows
        ]
    }


@router.get("/payments", response_model=ItemsResponse[PaymentOut])
async def payment_report(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    filter_status: Optional[PaymentStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_procurement),
):
    payments = await ReportService(session, actor).payment_report(
        start_date, end_date, status=filter_status.value if filter_status else None,
    )
    return {"data": [PaymentOut.model_validate(p) for p in payments]}


@router.get("/dashboard", response_model=DataResponse[DashboardMetrics])
async def dashboard_metrics(
    session: AsyncSession = Depends(get_db, scope="function"),
    actor: Actor = Depends(require_procurement),
):
    metrics = await ReportService(session, actor).dashboard_metrics()
    return {"data": DashboardMetrics.model_validate(metrics)}
