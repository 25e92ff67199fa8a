"""Vendor lookups: by owning user, and name/email search for the vendor list."""

from procurement.core.exceptions import ConflictError
from procurement.domain.vendor import Vendor
from procurement.repositories.base import BaseRepository


class VendorRepository(BaseRepository[Vendor]):
    model = Vendor
    search_columns = ("name", "email")
    conflict_message = "A vendor with this email already exists"

    async def get_by_user(self, user_id: str) -> Vendor | None:
        items = await self.find(user_id=user_id, limit=1)
        return items[0] if items else None

    async def create(self, **kwargs) -> Vendor:
        # Two unique columns: tell the caller which one collided
        if await self.get_by_user(kwargs["user_id"]):
            raise ConflictError("This user already has a vendor account")
        return await super().create(**kwargs)
