"""Pydantic models for users and todos."""

from .todo import (
    CategoryCount,
    Pagination,
    Priority,
    PriorityCount,
    Todo,
    TodoCreate,
    TodoPage,
    TodoStats,
    TodoUpdate,
)
from .user import User, UserRecord

__all__ = [
    "CategoryCount",
    "Pagination",
    "Priority",
    "PriorityCount",
    "Todo",
    "TodoCreate",
    "TodoPage",
    "TodoStats",
    "TodoUpdate",
    "User",
    "UserRecord",
]
