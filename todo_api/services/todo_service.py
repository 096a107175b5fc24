"""Todo service - business logic layer."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..errors import NotFoundError, ValidationError
from ..models import (
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
from ..repositories.base import TodoRepository
from .query import TodoQuery, build_todo_query

TODO_NOT_FOUND = "Todo not found"

# Fields that may be explicitly cleared with null, and what they clear to.
_CLEARABLE: Dict[str, Any] = {"description": "", "due_date": None}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_tags(tags: List[str]) -> List[str]:
    return [tag for tag in (tag.strip() for tag in tags) if tag]


def validate_new_todo(todo_data: TodoCreate) -> None:
    if not todo_data.title.strip():
        raise ValidationError("Title is required")
    if not todo_data.category.strip():
        raise ValidationError("Category cannot be empty")


def validate_todo_changes(todo_data: TodoUpdate) -> Dict[str, Any]:
    """Return the explicitly supplied fields as storage changes."""
    changes: Dict[str, Any] = {}
    for field in todo_data.model_fields_set:
        value = getattr(todo_data, field)
        if value is None:
            if field not in _CLEARABLE:
                raise ValidationError(f"{field} cannot be null")
            changes[field] = _CLEARABLE[field]
            continue
        if field == "title" and not value.strip():
            raise ValidationError("Title is required")
        if field == "category" and not value.strip():
            raise ValidationError("Category cannot be empty")
        if field == "priority":
            value = Priority(value).value
        if field == "tags":
            value = _clean_tags(value)
        changes[field] = value
    return changes


class TodoService:
    """Service for todo business logic. Every operation is scoped to an owner."""

    def __init__(self, repository: TodoRepository) -> None:
        self.repository = repository

    async def list_todos(self, owner_id: str, **params: Any) -> TodoPage:
        query = build_todo_query(owner_id, **params)
        return await self.list_by_query(query)

    async def list_by_query(self, query: TodoQuery) -> TodoPage:
        todos, total = await asyncio.gather(
            self.repository.find(query),
            self.repository.count(query),
        )
        pagination = Pagination(
            page=query.page,
            limit=query.limit,
            total=total,
            pages=query.pages_for(total),
        )
        return TodoPage(todos=todos, pagination=pagination)

    async def get_todo(self, owner_id: str, todo_id: str) -> Todo:
        todo = await self.repository.find_one(todo_id, owner_id)
        if todo is None:
            raise NotFoundError(TODO_NOT_FOUND)
        return todo

    async def create_todo(self, owner_id: str, todo_data: TodoCreate) -> Todo:
        validate_new_todo(todo_data)
        now = _utcnow()
        document = {
            "user_id": owner_id,
            "title": todo_data.title,
            "description": todo_data.description,
            "completed": False,
            "priority": todo_data.priority.value,
            "due_date": todo_data.due_date,
            "tags": _clean_tags(todo_data.tags),
            "category": todo_data.category,
            "created_at": now,
            "updated_at": now,
        }
        return await self.repository.insert(document)

    async def update_todo(self, owner_id: str, todo_id: str, todo_data: TodoUpdate) -> Todo:
        changes = validate_todo_changes(todo_data)
        changes["updated_at"] = _utcnow()
        todo = await self.repository.update(todo_id, owner_id, changes)
        if todo is None:
            raise NotFoundError(TODO_NOT_FOUND)
        return todo

    async def delete_todo(self, owner_id: str, todo_id: str) -> None:
        if not await self.repository.delete(todo_id, owner_id):
            raise NotFoundError(TODO_NOT_FOUND)

    async def toggle_todo(self, owner_id: str, todo_id: str) -> Todo:
        todo = await self.repository.toggle(todo_id, owner_id, _utcnow())
        if todo is None:
            raise NotFoundError(TODO_NOT_FOUND)
        return todo

    async def get_stats(self, owner_id: str) -> TodoStats:
        total, completed, by_priority, by_category = await asyncio.gather(
            self.repository.count(TodoQuery(owner_id=owner_id)),
            self.repository.count(TodoQuery(owner_id=owner_id, completed=True)),
            self.repository.count_by(owner_id, "priority"),
            self.repository.count_by(owner_id, "category"),
        )
        completion_rate = (completed / total) * 100 if total > 0 else 0.0
        return TodoStats(
            total=total,
            completed=completed,
            pending=total - completed,
            completion_rate=completion_rate,
            priority_stats=[
                PriorityCount(priority=name, count=count) for name, count in sorted(by_priority.items())
            ],
            category_stats=[
                CategoryCount(category=name, count=count) for name, count in sorted(by_category.items())
            ],
        )
