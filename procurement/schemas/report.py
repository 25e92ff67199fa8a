"""Report and dashboard-metric schemas."""


from procurement.schemas.common import CamelModel
from procurement.schemas.tender import TenderOut
from procurement.schemas.vendor import VendorOut


class BidVendorRef(CamelModel):
    name: str
    business_type: str


class BidTenderRef(CamelModel):
    title: str
    status: str


class TenderBidSummary(CamelModel):
    id: str
    amount: float
    status: str
    vendor: BidVendorRef | None = None


class VendorBidSummary(CamelModel):
    id: str
    amount: float
    status: str
    tender: BidTenderRef | None = None


class TenderReport(TenderOut):
    bids: list[TenderBidSummary] = []


class VendorReport(VendorOut):
    bids: list[VendorBidSummary] = []


class TenderMetrics(CamelModel):
    total: int
    published: int
    under_review: int
    awarded: int


class VendorMetrics(CamelModel):
    total: int
    mse: int
    active: int


class PaymentMetrics(CamelModel):
    # Sum of every live payment's amount, whatever its status
    total: float
    completed: int
    pending: int


class DashboardMetrics(CamelModel):
    tenders: TenderMetrics
    vendors: VendorMetrics
    payments: PaymentMetrics
