"""Authentication helpers and routes for the API."""

from .dependencies import authenticate, get_current_user
from .router import router
from .security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

__all__ = [
    "authenticate",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "hash_password",
    "router",
    "verify_password",
]
