"""User / auth Pydantic schemas."""


from datetime import datetime

from pydantic import Field

from procurement.core.access import Role
from procurement.schemas.common import EMAIL_PATTERN, CamelModel

class UserRegister(CamelModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    full_name: str = ""

class UserLogin(CamelModel):
    email: str
    password: str

class RoleUpdate(CamelModel):
    role: Role

class UserOut(CamelModel):
    id: str
    email: str
    full_name: str
    role: str
    is_active: bool
    vendor_id: str | None = None
    created_at: datetime

class TokenOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
