"""SQLAlchemy ORM model for Tenders."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from procurement.db.base import Base
from procurement.domain.enums import TenderStatus
from procurement.domain.mixins import IdMixin, SoftDeleteMixin, TimestampMixin


class Tender(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "tenders"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    estimated_value: Mapped[float] = mapped_column(Numeric(16, 2, asdecimal=False), nullable=False)
    submission_deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # draft | published | under_review | awarded | cancelled
    status: Mapped[str] = mapped_column(
        String(50), default=TenderStatus.DRAFT.value, nullable=False, index=True
    )
    # goods | services | works
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    is_reserved_for_mse: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_by_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_by: Mapped["User"] = relationship(lazy="selectin")
