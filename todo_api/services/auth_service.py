"""Auth service - registration, login and profile lookup."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging

from ..auth.schemas import LoginRequest, RegisterRequest
from ..auth.security import create_access_token, hash_password, verify_password
from ..errors import AuthError, DuplicateError, NotFoundError
from ..models import User
from ..repositories.base import UserRepository
from ..repositories.user_repository import DUPLICATE_USER_MESSAGE

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


class AuthService:
    """Service for credential handling."""

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def register(self, payload: RegisterRequest) -> AuthResult:
        logger.info("Registration attempt for username=%s", payload.username)
        if await self.users.exists(username=payload.username, email=payload.email):
            raise DuplicateError(DUPLICATE_USER_MESSAGE)
        password_hash = hash_password(payload.password)
        # A concurrent registration can still win the race; the store's unique
        # indexes turn that into DuplicateError inside create().
        user = await self.users.create(
            username=payload.username,
            email=payload.email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        logger.info("User created id=%s", user.id)
        return AuthResult(user=user, token=create_access_token(user.id))

    async def login(self, payload: LoginRequest) -> AuthResult:
        record = await self.users.get_by_email_with_password(payload.email)
        if record is None or not verify_password(payload.password, record.password_hash):
            raise AuthError(INVALID_CREDENTIALS, code="invalid_credentials")
        return AuthResult(user=record.public(), token=create_access_token(record.id))

    async def get_profile(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
