"""Error taxonomy shared by the services, repositories and HTTP layer.

Every error the API reports on purpose is an ``AppError``. They subclass
FastAPI's ``HTTPException`` so they can be raised anywhere below a route and
still be rendered by the single envelope handler in ``todo_api.main``.
"""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import HTTPException, status

from .config import ConfigurationError


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "error"
    default_message: str = "Server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(status_code=type(self).status_code, detail=self.message, headers=headers)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid input"


class DuplicateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate"
    default_message = "Duplicate field value entered"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_token"
    default_message = "Not authorized"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None) -> None:
        super().__init__(message, code=code, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    default_message = "Server error"


__all__ = [
    "AppError",
    "AuthError",
    "ConfigurationError",
    "DuplicateError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
]
