"""Report service: tender, vendor and payment reports plus dashboard counts.

Reports are read-only and unpaginated. Date filters are inclusive calendar
days: `end_date` covers the whole of that day.
"""


import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor
from procurement.core.exceptions import ValidationError
from procurement.domain.bid import Bid
from procurement.domain.enums import BusinessType, PaymentStatus, TenderStatus, VendorStatus
from procurement.domain.payment import Payment
from procurement.domain.tender import Tender
from procurement.domain.vendor import Vendor
from procurement.repositories.bid import BidRepository
from procurement.repositories.payment import PaymentRepository
from procurement.repositories.tender import TenderRepository
from procurement.repositories.vendor import VendorRepository

logger = logging.getLogger(__name__)


def _day_range(start_date: date | None, end_date: date | None) -> tuple[datetime | None, datetime | None]:
    if start_date and end_date and start_date > end_date:
        raise ValidationError(
            "startDate must not be after endDate",
            fields=[{"field": "startDate", "message": "Must not be after endDate"}],
        )
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc) if start_date else None
    end = (
        datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
        if end_date else None
    )
    return start, end


def _group(bids: list[Bid], key: str) -> dict[str, list[Bid]]:
    grouped: dict[str, list[Bid]] = defaultdict(list)
    for bid in bids:
        grouped[getattr(bid, key)].append(bid)
    return grouped


class ReportService:
    def __init__(self, session: AsyncSession, actor: Actor):
        self._actor = actor
        self._tenders = TenderRepository(session)
        self._vendors = VendorRepository(session)
        self._bids = BidRepository(session)
        self._payments = PaymentRepository(session)

    async def procurement_report(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        status: str | None = None,
    ) -> list[tuple[Tender, list[Bid]]]:
        """Tenders created in the range, newest first, each with its live bids."""
        start, end = _day_range(start_date, end_date)
        tenders = await self._tenders.find_between("created_at", start, end, status=status)
        bids = _group(await self._bids.find_in("tender_id", [t.id for t in tenders]), "tender_id")
        logger.info("Procurement report for %s: %d tenders", self._actor.email, len(tenders))
        return [(tender, bids.get(tender.id, [])) for tender in tenders]

    async def vendor_report(
        self,
        business_type: str | None = None,
        status: str | None = None,
    ) -> list[tuple[Vendor, list[Bid]]]:
        vendors = await self._vendors.find_between(
            "created_at", status=status, business_type=business_type
        )
        bids = _group(await self._bids.find_in("vendor_id", [v.id for v in vendors]), "vendor_id")
        logger.info("Vendor report for %s: %d vendors", self._actor.email, len(vendors))
        return [(vendor, bids.get(vendor.id, [])) for vendor in vendors]

    async def payment_report(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        status: str | None = None,
    ) -> list[Payment]:
        """Payments by payment date, newest first.

        A date range only matches payments that have been completed, since
        only those carry a payment date.
        """
        start, end = _day_range(start_date, end_date)
        payments = await self._payments.find_between("payment_date", start, end, status=status)
        logger.info("Payment report for %s: %d payments", self._actor.email, len(payments))
        return payments

    async def dashboard_metrics(self) -> dict:
        tenders = await self._tenders.count_by("status")
        vendor_types = await self._vendors.count_by("business_type")
        vendor_statuses = await self._vendors.count_by("status")
        payments = await self._payments.count_by("status")
        return {
            "tenders": {
                "total": sum(tenders.values()),
                "published": tenders.get(TenderStatus.PUBLISHED.value, 0),
                "under_review": tenders.get(TenderStatus.UNDER_REVIEW.value, 0),
                "awarded": tenders.get(TenderStatus.AWARDED.value, 0),
            },
            "vendors": {
                "total": sum(vendor_types.values()),
                "mse": vendor_types.get(BusinessType.MSE.value, 0),
                "active": vendor_statuses.get(VendorStatus.ACTIVE.value, 0),
            },
            "payments": {
                "total": await self._payments.sum_of("amount"),
                "completed": payments.get(PaymentStatus.COMPLETED.value, 0),
                "pending": payments.get(PaymentStatus.PENDING.value, 0),
            },
        }
