"""Roles, the authenticated Actor, and resource-level capability checks.

Role gates are static set membership (see `require_roles` in core.auth).
Ownership gates are parameterized by the resource: a vendor-role actor only
reaches records whose vendor reference equals its own vendor record.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from procurement.core.exceptions import ForbiddenError


class Role(str, Enum):
    ADMIN = "admin"
    PROCUREMENT_OFFICER = "procurement_officer"
    FINANCE_OFFICER = "finance_officer"
    VENDOR = "vendor"
    AUDITOR = "auditor"


PROCUREMENT_ROLES = frozenset({Role.ADMIN, Role.PROCUREMENT_OFFICER})
FINANCE_ROLES = frozenset({Role.ADMIN, Role.FINANCE_OFFICER})
STAFF_ROLES = frozenset(set(Role) - {Role.VENDOR})
ADMIN_ROLES = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class Actor:
    """The identity a request runs as."""

    user_id: str
    email: str
    role: Role
    vendor_id: str | None = None

    @property
    def is_vendor(self) -> bool:
        return self.role == Role.VENDOR

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def has_role(self, roles) -> bool:
        return self.role in roles

    def owns_vendor(self, vendor_id: str | None) -> bool:
        return self.vendor_id is not None and self.vendor_id == vendor_id


def ensure_vendor_access(actor: Actor, vendor_id: str) -> None:
    """Staff see every vendor's records; a vendor sees only its own."""
    if not actor.is_staff and not actor.owns_vendor(vendor_id):
        raise ForbiddenError("Vendors may only access their own records")

