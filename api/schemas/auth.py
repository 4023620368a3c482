"""Authentication request schemas."""

from typing import Optional

from pydantic import Field, field_validator

from api.schemas.common import CamelModel, EmailStr, RequiredStr
from core.entities import Role


MIN_PASSWORD_LENGTH = 6


def check_password_strength(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return value


class LoginRequest(CamelModel):
    email: RequiredStr
    password: RequiredStr


class RegisterRequest(CamelModel):
    name: RequiredStr
    email: EmailStr
    password: str
    role: Role = Field(default=Role.MEMBER)
    position: Optional[str] = None
    department: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)


class ChangePasswordRequest(CamelModel):
    current_password: RequiredStr
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)
