from sqlalchemy import or_, select

from procurement.domain.bid import Bid
from procurement.domain.payment import Invoice, Payment, PaymentSchedule
from procurement.repositories.base import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    model = Payment
    search_columns = ("transaction_id", "notes")

    async def exists_for_tender(self, tender_id: str) -> bool:
        """True if a live payment references the tender directly or through one of its bids."""
        tender_bids = select(Bid.id).where(Bid.tender_id == tender_id)
        q = (
            self._base_query()
            .where(or_(Payment.related_tender_id == tender_id, Payment.related_bid_id.in_(tender_bids)))
            .limit(1)
        )
        return (await self._session.execute(q)).scalars().first() is not None


class InvoiceRepository(BaseRepository[Invoice]):
    model = Invoice
    search_columns = ("invoice_number", "description")
    conflict_message = "An invoice with this number already exists"


class PaymentScheduleRepository(BaseRepository[PaymentSchedule]):
    model = PaymentSchedule
    search_columns = ("description",)
