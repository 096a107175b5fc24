"""User records. The password hash never leaves ``UserRecord``."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from pydantic import EmailStr

from .todo import ApiModel


class User(ApiModel):
    id: str
    username: str
    email: EmailStr
    created_at: datetime

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "User":
        return cls(
            id=str(document["_id"]),
            username=document["username"],
            email=document["email"],
            created_at=document["created_at"],
        )


class UserRecord(User):
    password_hash: str

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "UserRecord":
        return cls(
            id=str(document["_id"]),
            username=document["username"],
            email=document["email"],
            created_at=document["created_at"],
            password_hash=document["password_hash"],
        )

    def public(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            created_at=self.created_at,
        )
