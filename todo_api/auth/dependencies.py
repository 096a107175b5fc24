"""Bearer-token guard for protected routes."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import AuthError
from ..models import User
from ..repositories.base import UserRepository
from .security import TokenInvalidError, get_user_id_from_token

_bearer = HTTPBearer(auto_error=False)


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.users


async def authenticate(token: Optional[str], users: UserRepository) -> User:
    """Resolve a raw bearer token to the user it was issued for."""
    if not token:
        raise AuthError("Not authorized, no token", code="no_token")
    user_id = get_user_id_from_token(token)
    user = await users.get_by_id(user_id)
    if user is None:
        raise TokenInvalidError("Not authorized, user no longer exists")
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    token = credentials.credentials if credentials else None
    user = await authenticate(token, users)
    request.state.user = user
    return user
