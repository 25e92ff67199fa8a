from procurement.domain.user import User
from procurement.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User
    search_columns = ("email", "full_name")
    conflict_message = "A user with this email already exists"

    async def get_by_email(self, email: str) -> User | None:
        items = await self.find(email=email.lower(), limit=1)
        return items[0] if items else None
