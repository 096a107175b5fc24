"""Listing query construction for todos.

A ``TodoQuery`` is built from raw, optional request parameters and is then
rendered by a repository: as a MongoDB filter/sort/skip/limit for Motor, or as
an in-process predicate and sort key for the in-memory store. Filters, sort
and pagination are independent: each absent parameter is a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import ValidationError
from ..models.todo import Priority

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_SORT_FIELD = "created_at"

ASCENDING = 1
DESCENDING = -1

# API name -> stored field name
SORTABLE_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "dueDate": "due_date",
    "title": "title",
    "priority": "priority",
    "completed": "completed",
    "category": "category",
}
SORTABLE_FIELDS.update({stored: stored for stored in list(SORTABLE_FIELDS.values())})

_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def parse_completed(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized == "":
        return None
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValidationError("completed must be true or false")


def parse_priority(value: Any) -> Optional[Priority]:
    if value is None or value == "":
        return None
    try:
        return Priority(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError("Priority must be low, medium, or high") from exc


@dataclass(frozen=True)
class TodoQuery:
    owner_id: str
    search: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: int = DESCENDING
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def pages_for(self, total: int) -> int:
        if total <= 0:
            return 0
        return math.ceil(total / self.limit)

    # MongoDB rendering

    def to_filter(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {"user_id": self.owner_id}
        if self.search:
            pattern = re.escape(self.search)
            query["$or"] = [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"description": {"$regex": pattern, "$options": "i"}},
            ]
        if self.completed is not None:
            query["completed"] = self.completed
        if self.priority is not None:
            query["priority"] = self.priority.value
        if self.category is not None:
            query["category"] = self.category
        return query

    def to_sort(self) -> List[Tuple[str, int]]:
        return [(self.sort_field, self.sort_direction), ("_id", self.sort_direction)]

    # In-process rendering

    def matches(self, document: Mapping[str, Any]) -> bool:
        if document.get("user_id") != self.owner_id:
            return False
        if self.search:
            needle = self.search.casefold()
            haystacks = (document.get("title") or "", document.get("description") or "")
            if not any(needle in text.casefold() for text in haystacks):
                return False
        if self.completed is not None and bool(document.get("completed")) != self.completed:
            return False
        if self.priority is not None and document.get("priority") != self.priority.value:
            return False
        if self.category is not None and document.get("category") != self.category:
            return False
        return True

    def sort_key(self, document: Mapping[str, Any]) -> Tuple[Any, ...]:
        # Missing values sort first ascending, as MongoDB orders nulls.
        value = document.get(self.sort_field)
        return (value is not None, value if value is not None else 0, str(document["_id"]))


def build_todo_query(
    owner_id: str,
    *,
    search: Optional[str] = None,
    completed: Any = None,
    priority: Any = None,
    category: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    page: Any = None,
    limit: Any = None,
) -> TodoQuery:
    """Normalize raw listing parameters into a ``TodoQuery``.

    Non-numeric or non-positive ``page``/``limit`` fall back to the defaults,
    ``limit`` is capped at ``MAX_LIMIT`` and an unknown ``sort_by`` falls back
    to creation time. Malformed ``completed`` or ``priority`` values raise
    ``ValidationError``.
    """
    search_text = search.strip() if search else ""
    category_value = category.strip() if category else ""
    sort_field = SORTABLE_FIELDS.get((sort_by or "").strip(), DEFAULT_SORT_FIELD)
    direction = ASCENDING if (sort_order or "").strip().lower() == "asc" else DESCENDING

    return TodoQuery(
        owner_id=owner_id,
        search=search_text or None,
        completed=parse_completed(completed),
        priority=parse_priority(priority),
        category=category_value or None,
        sort_field=sort_field,
        sort_direction=direction,
        page=_positive_int(page, DEFAULT_PAGE),
        limit=min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
    )
