"""SQLAlchemy ORM model for Bids. One bid per (tender, vendor) pair."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from procurement.db.base import Base
from procurement.domain.enums import BidStatus
from procurement.domain.mixins import IdMixin, SoftDeleteMixin, TimestampMixin


class Bid(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "bids"
    __table_args__ = (
        UniqueConstraint("tender_id", "vendor_id", name="uq_bids_tender_vendor"),
    )

    tender_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenders.id"), nullable=False, index=True
    )
    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendors.id"), nullable=False, index=True
    )
    amount: Mapped[float] = mapped_column(Numeric(16, 2, asdecimal=False), nullable=False)

    # submitted | under_review | accepted | rejected
    status: Mapped[str] = mapped_column(
        String(50), default=BidStatus.SUBMITTED.value, nullable=False, index=True
    )
    technical_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    evaluated_by_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=True
    )
    evaluated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    tender: Mapped["Tender"] = relationship(lazy="selectin")
    vendor: Mapped["Vendor"] = relationship(lazy="selectin")
