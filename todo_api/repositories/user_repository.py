"""User repositories - data access layer for credentials."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection

from ..errors import DuplicateError
from ..models import User, UserRecord
from .base import UserRepository, store_errors

DUPLICATE_USER_MESSAGE = "User already exists with this email or username"
_PUBLIC_PROJECTION = {"password_hash": 0}


class MongoUserRepository(UserRepository):
    """User storage in a MongoDB collection with unique email/username indexes."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    async def create(self, *, username: str, email: str, password_hash: str, created_at: datetime) -> User:
        document = {
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "created_at": created_at,
        }
        with store_errors(DUPLICATE_USER_MESSAGE):
            result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return User.from_document(document)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        if not ObjectId.is_valid(user_id):
            return None
        with store_errors():
            document = await self.collection.find_one({"_id": ObjectId(user_id)}, _PUBLIC_PROJECTION)
        return User.from_document(document) if document else None

    async def get_by_email_with_password(self, email: str) -> Optional[UserRecord]:
        with store_errors():
            document = await self.collection.find_one({"email": email})
        return UserRecord.from_document(document) if document else None

    async def exists(self, *, username: str, email: str) -> bool:
        with store_errors():
            document = await self.collection.find_one(
                {"$or": [{"email": email}, {"username": username}]},
                {"_id": 1},
            )
        return document is not None


class InMemoryUserRepository(UserRepository):
    """User storage kept in process memory (development and tests)."""

    def __init__(self) -> None:
        self._users: Dict[str, dict] = {}

    async def create(self, *, username: str, email: str, password_hash: str, created_at: datetime) -> User:
        if await self.exists(username=username, email=email):
            raise DuplicateError(DUPLICATE_USER_MESSAGE)
        document = {
            "_id": str(ObjectId()),
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "created_at": created_at,
        }
        self._users[document["_id"]] = document
        return User.from_document(document)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        document = self._users.get(user_id)
        return User.from_document(document) if document else None

    async def get_by_email_with_password(self, email: str) -> Optional[UserRecord]:
        for document in self._users.values():
            if document["email"] == email:
                return UserRecord.from_document(document)
        return None

    async def exists(self, *, username: str, email: str) -> bool:
        return any(
            document["email"] == email or document["username"] == username
            for document in self._users.values()
        )

    def remove(self, user_id: str) -> None:
        """Drop a user (testing helper)."""
        self._users.pop(user_id, None)
