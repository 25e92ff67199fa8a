"""User registration, login and role management."""


import logging

from sqlalchemy.ext.asyncio import AsyncSession

from procurement.core.access import Actor, Role
from procurement.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from procurement.core.pagination import PaginationParams
from procurement.core.security import create_access_token, hash_password, verify_password
from procurement.domain.user import User
from procurement.repositories.user import UserRepository
from procurement.repositories.vendor import VendorRepository
from procurement.schemas.user import UserLogin, UserRegister

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, session: AsyncSession):
        self._repo = UserRepository(session)
        self._vendors = VendorRepository(session)

    async def register(self, data: UserRegister, role: Role = Role.VENDOR) -> User:
        email = data.email.lower()
        if await self._repo.get_by_email(email):
            raise ConflictError("A user with this email already exists")
        user = await self._repo.create(
            email=email,
            hashed_password=hash_password(data.password),
            full_name=data.full_name,
            role=role.value,
        )
        logger.info("User %s registered with role %s", user.email, user.role)
        return user

    async def login(self, data: UserLogin) -> tuple[str, User]:
        user = await self._repo.get_by_email(data.email)
        if not user or not verify_password(data.password, user.hashed_password):
            raise UnauthorizedError("Invalid email or password")
        if not user.is_active:
            raise UnauthorizedError("Account is disabled")
        return create_access_token(user.id, user.role), user

    async def resolve_actor(self, user_id: str) -> Actor:
        """Load the identity behind a token; inactive or deleted users are rejected."""
        user = await self._repo.get_by_id(user_id)
        if not user or not user.is_active:
            raise UnauthorizedError("User not found or inactive")
        vendor = await self._vendors.get_by_user(user.id)
        return Actor(
            user_id=user.id,
            email=user.email,
            role=Role(user.role),
            vendor_id=vendor.id if vendor else None,
        )

    async def get_user(self, user_id: str) -> User:
        user = await self._repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def list_users(self, pagination: PaginationParams, role: str | None = None):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"role": role},
            search=pagination.search,
        )

    async def change_role(self, user_id: str, role: Role) -> User:
        user = await self.get_user(user_id)
        logger.info("User %s role %s -> %s", user.email, user.role, role.value)
        return await self._repo.update(user, role=role.value)

    async def ensure_admin(self, email: str, password: str) -> None:
        """Create the bootstrap admin if the account does not exist yet."""
        if await self._repo.get_by_email(email):
            return
        await self.register(
            UserRegister(email=email, password=password, full_name="Administrator"),
            role=Role.ADMIN,
        )
