"""Repository interfaces and MongoDB error translation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

from pymongo.errors import (
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

from ..errors import DuplicateError, InternalError
from ..models import Todo, User, UserRecord
from ..services.query import TodoQuery

logger = logging.getLogger(__name__)

_TIMEOUT_ERRORS = (ExecutionTimeout, NetworkTimeout, ServerSelectionTimeoutError, WTimeoutError)


@contextmanager
def store_errors(duplicate_message: str = "Duplicate field value entered") -> Iterator[None]:
    """Translate driver exceptions into the API error taxonomy."""
    try:
        yield
    except DuplicateKeyError as exc:
        raise DuplicateError(duplicate_message) from exc
    except _TIMEOUT_ERRORS as exc:
        logger.error("MongoDB operation timed out: %s", exc)
        raise InternalError("Database operation timed out") from exc
    except PyMongoError as exc:
        logger.error("MongoDB operation failed: %s", exc)
        raise InternalError("Database unavailable") from exc


class UserRepository(ABC):
    @abstractmethod
    async def create(self, *, username: str, email: str, password_hash: str, created_at: datetime) -> User:
        """Insert a user; raises ``DuplicateError`` if username or email is taken."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_by_email_with_password(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def exists(self, *, username: str, email: str) -> bool:
        """True when either the username or the email is already registered."""


class TodoRepository(ABC):
    @abstractmethod
    async def insert(self, document: Dict[str, Any]) -> Todo:
        ...

    @abstractmethod
    async def find_one(self, todo_id: str, owner_id: str) -> Optional[Todo]:
        ...

    @abstractmethod
    async def find(self, query: TodoQuery) -> List[Todo]:
        ...

    @abstractmethod
    async def count(self, query: TodoQuery) -> int:
        """Count matches of ``query`` ignoring its pagination."""

    @abstractmethod
    async def update(self, todo_id: str, owner_id: str, changes: Mapping[str, Any]) -> Optional[Todo]:
        ...

    @abstractmethod
    async def toggle(self, todo_id: str, owner_id: str, now: datetime) -> Optional[Todo]:
        ...

    @abstractmethod
    async def delete(self, todo_id: str, owner_id: str) -> bool:
        ...

    @abstractmethod
    async def count_by(self, owner_id: str, field: str) -> Dict[str, int]:
        """Group the owner's todos by ``field`` and count each group."""
