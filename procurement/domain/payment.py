"""SQLAlchemy ORM models for Payments, Invoices and Payment Schedules."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from procurement.db.base import Base
from procurement.domain.enums import InvoiceStatus, PaymentStatus, ScheduleStatus
from procurement.domain.mixins import IdMixin, SoftDeleteMixin, TimestampMixin


class Invoice(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "invoices"

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendors.id"), nullable=False, index=True
    )
    invoice_number: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    amount: Mapped[float] = mapped_column(Numeric(16, 2, asdecimal=False), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    # pending | approved | paid | rejected
    status: Mapped[str] = mapped_column(
        String(50), default=InvoiceStatus.PENDING.value, nullable=False, index=True
    )
    created_by_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)

    vendor: Mapped["Vendor"] = relationship(lazy="selectin")


class Payment(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "payments"

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendors.id"), nullable=False, index=True
    )
    amount: Mapped[float] = mapped_column(Numeric(16, 2, asdecimal=False), nullable=False)
    # pending | processing | completed | failed
    status: Mapped[str] = mapped_column(
        String(50), default=PaymentStatus.PENDING.value, nullable=False, index=True
    )
    # bank_transfer | check | credit_card
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Stamped only when an update moves the payment to "completed"
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    processed_by_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    related_tender_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("tenders.id"), nullable=True, index=True
    )
    related_bid_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("bids.id"), nullable=True
    )
    invoice_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("invoices.id"), nullable=True, index=True
    )

    vendor: Mapped["Vendor"] = relationship(lazy="selectin")
    processed_by: Mapped["User"] = relationship(lazy="selectin")
    related_tender: Mapped[Optional["Tender"]] = relationship(lazy="selectin")
    related_bid: Mapped[Optional["Bid"]] = relationship(lazy="selectin")
    invoice: Mapped[Optional["Invoice"]] = relationship(lazy="selectin")


class PaymentSchedule(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "payment_schedules"

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendors.id"), nullable=False, index=True
    )
    amount: Mapped[float] = mapped_column(Numeric(16, 2, asdecimal=False), nullable=False)
    schedule_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    # one_time | weekly | monthly | quarterly | yearly
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # active | paused | completed | cancelled
    status: Mapped[str] = mapped_column(
        String(50), default=ScheduleStatus.ACTIVE.value, nullable=False, index=True
    )
    created_by_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)

    vendor: Mapped["Vendor"] = relationship(lazy="selectin")
