"""Todo data models using Pydantic."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
DEFAULT_CATEGORY = "general"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ApiModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so stored values always compare."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TodoCreate(ApiModel):
    """Model for creating new todos."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field("", max_length=DESCRIPTION_MAX_LENGTH)
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    category: str = DEFAULT_CATEGORY

    @field_validator("due_date")
    @classmethod
    def due_date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class TodoUpdate(ApiModel):
    """Partial update. Only fields present in ``model_fields_set`` are applied."""

    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def due_date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class Todo(ApiModel):
    """Complete todo model with system fields."""

    id: str
    user_id: str
    title: str
    description: str = ""
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    category: str = DEFAULT_CATEGORY
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Todo":
        return cls(
            id=str(document["_id"]),
            user_id=str(document["user_id"]),
            title=document["title"],
            description=document.get("description") or "",
            completed=bool(document.get("completed", False)),
            priority=document.get("priority", Priority.MEDIUM.value),
            due_date=document.get("due_date"),
            tags=list(document.get("tags") or []),
            category=document.get("category") or DEFAULT_CATEGORY,
            created_at=document["created_at"],
            updated_at=document["updated_at"],
        )


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    pages: int


class TodoPage(ApiModel):
    todos: List[Todo]
    pagination: Pagination


class PriorityCount(ApiModel):
    priority: str
    count: int


class CategoryCount(ApiModel):
    category: str
    count: int


class TodoStats(ApiModel):
    total: int
    completed: int
    pending: int
    completion_rate: float
    priority_stats: List[PriorityCount]
    category_stats: List[CategoryCount]
