from __future__ import annotations

from typing import Any, Optional

from pydantic import ConfigDict, EmailStr, Field, field_validator

from ..models.todo import ApiModel
from ..models.user import User
from .security import BCRYPT_MAX_BYTES


class CredentialsModel(ApiModel):
    """Request body carrying a password; the password is taken byte for byte."""

    model_config = ConfigDict(str_strip_whitespace=False)

    @field_validator("email", "username", mode="before", check_fields=False)
    @classmethod
    def strip_identifiers(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class RegisterRequest(CredentialsModel):
    username: str = Field(min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(CredentialsModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class AuthData(ApiModel):
    id: str
    username: str
    email: EmailStr
    token: str


class AuthResponse(ApiModel):
    success: bool = True
    message: Optional[str] = None
    data: AuthData


class MeResponse(ApiModel):
    success: bool = True
    data: User
