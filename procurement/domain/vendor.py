"""SQLAlchemy ORM model for Vendors.

Pattern shared by every domain model in this package:
  - Inherit Base, IdMixin, TimestampMixin, SoftDeleteMixin
  - UUID string primary key
  - created_at / updated_at / deleted_at (soft delete)
  - many-to-one references loaded with lazy="selectin" so responses can
    embed the related display fields
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import Float, ForeignKey, Index, JSON, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from procurement.db.base import Base
from procurement.domain.enums import VendorStatus
from procurement.domain.mixins import IdMixin, SoftDeleteMixin, TimestampMixin


class Vendor(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "vendors"
    # Unique among live rows only, so a deleted vendor frees its email and user
    __table_args__ = (
        Index(
            "uq_vendors_email_live", "email", unique=True,
            sqlite_where=text("deleted_at IS NULL"), postgresql_where=text("deleted_at IS NULL"),
        ),
        Index(
            "uq_vendors_user_live", "user_id", unique=True,
            sqlite_where=text("deleted_at IS NULL"), postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # "MSE" | "Large Enterprise"
    business_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    contact_person: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    mse_certificate: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # "Pending" | "Active" | "Suspended"
    status: Mapped[str] = mapped_column(
        String(50), default=VendorStatus.PENDING.value, nullable=False, index=True
    )
    compliance_score: Mapped[float] = mapped_column(Float, default=0, nullable=False)

    # accountName / accountNumber / bankName / ifscCode
    bank_details: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    # One vendor record per authentication identity
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    user: Mapped["User"] = relationship(lazy="selectin")
