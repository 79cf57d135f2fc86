"""Account Schemas — registration/login payloads and the public user view.

Invariants:
    - UserResponse has no password field
    - Length rules on password live in AccountService (configurable minimum)
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.core.accounts import public_user
from app.core.document import UserRecord


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    last_login: datetime | None = None

    @classmethod
    def from_user(cls, user: UserRecord) -> "UserResponse":
        return cls(**public_user(user))


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
