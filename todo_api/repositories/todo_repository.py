"""Todo repositories - data access layer."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from ..models import Todo
from ..services.query import DESCENDING, TodoQuery
from .base import TodoRepository, store_errors


def _owned(todo_id: str, owner_id: str) -> Optional[Dict[str, Any]]:
    if not ObjectId.is_valid(todo_id):
        return None
    return {"_id": ObjectId(todo_id), "user_id": owner_id}


class MongoTodoRepository(TodoRepository):
    """Todo storage in a MongoDB collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    async def insert(self, document: Dict[str, Any]) -> Todo:
        document = dict(document)
        with store_errors():
            result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return Todo.from_document(document)

    async def find_one(self, todo_id: str, owner_id: str) -> Optional[Todo]:
        selector = _owned(todo_id, owner_id)
        if selector is None:
            return None
        with store_errors():
            document = await self.collection.find_one(selector)
        return Todo.from_document(document) if document else None

    async def find(self, query: TodoQuery) -> List[Todo]:
        cursor = (
            self.collection.find(query.to_filter())
            .sort(query.to_sort())
            .skip(query.skip)
            .limit(query.limit)
        )
        with store_errors():
            documents = await cursor.to_list(length=query.limit)
        return [Todo.from_document(document) for document in documents]

    async def count(self, query: TodoQuery) -> int:
        with store_errors():
            return await self.collection.count_documents(query.to_filter())

    async def update(self, todo_id: str, owner_id: str, changes: Mapping[str, Any]) -> Optional[Todo]:
        selector = _owned(todo_id, owner_id)
        if selector is None:
            return None
        with store_errors():
            document = await self.collection.find_one_and_update(
                selector,
                {"$set": dict(changes)},
                return_document=ReturnDocument.AFTER,
            )
        return Todo.from_document(document) if document else None

    async def toggle(self, todo_id: str, owner_id: str, now: datetime) -> Optional[Todo]:
        selector = _owned(todo_id, owner_id)
        if selector is None:
            return None
        # Aggregation-pipeline update flips the flag atomically on the server.
        pipeline = [{"$set": {"completed": {"$not": ["$completed"]}, "updated_at": now}}]
        with store_errors():
            document = await self.collection.find_one_and_update(
                selector,
                pipeline,
                return_document=ReturnDocument.AFTER,
            )
        return Todo.from_document(document) if document else None

    async def delete(self, todo_id: str, owner_id: str) -> bool:
        selector = _owned(todo_id, owner_id)
        if selector is None:
            return False
        with store_errors():
            result = await self.collection.delete_one(selector)
        return result.deleted_count == 1

    async def count_by(self, owner_id: str, field: str) -> Dict[str, int]:
        pipeline = [
            {"$match": {"user_id": owner_id}},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ]
        with store_errors():
            rows = await self.collection.aggregate(pipeline).to_list(length=None)
        return {str(row["_id"]): int(row["count"]) for row in rows}


class InMemoryTodoRepository(TodoRepository):
    """Todo storage kept in process memory (development and tests)."""

    def __init__(self) -> None:
        self._todos: Dict[str, Dict[str, Any]] = {}

    def _get_owned(self, todo_id: str, owner_id: str) -> Optional[Dict[str, Any]]:
        document = self._todos.get(todo_id)
        if document is None or document["user_id"] != owner_id:
            return None
        return document

    async def insert(self, document: Dict[str, Any]) -> Todo:
        stored = dict(document)
        stored["_id"] = str(ObjectId())
        stored["tags"] = list(stored.get("tags") or [])
        self._todos[stored["_id"]] = stored
        return Todo.from_document(stored)

    async def find_one(self, todo_id: str, owner_id: str) -> Optional[Todo]:
        document = self._get_owned(todo_id, owner_id)
        return Todo.from_document(document) if document else None

    async def find(self, query: TodoQuery) -> List[Todo]:
        matches = [document for document in self._todos.values() if query.matches(document)]
        matches.sort(key=query.sort_key, reverse=query.sort_direction == DESCENDING)
        window = matches[query.skip : query.skip + query.limit]
        return [Todo.from_document(document) for document in window]

    async def count(self, query: TodoQuery) -> int:
        return sum(1 for document in self._todos.values() if query.matches(document))

    async def update(self, todo_id: str, owner_id: str, changes: Mapping[str, Any]) -> Optional[Todo]:
        document = self._get_owned(todo_id, owner_id)
        if document is None:
            return None
        document.update(changes)
        return Todo.from_document(document)

    async def toggle(self, todo_id: str, owner_id: str, now: datetime) -> Optional[Todo]:
        document = self._get_owned(todo_id, owner_id)
        if document is None:
            return None
        document["completed"] = not document.get("completed", False)
        document["updated_at"] = now
        return Todo.from_document(document)

    async def delete(self, todo_id: str, owner_id: str) -> bool:
        if self._get_owned(todo_id, owner_id) is None:
            return False
        del self._todos[todo_id]
        return True

    async def count_by(self, owner_id: str, field: str) -> Dict[str, int]:
        counts = Counter(
            str(document.get(field))
            for document in self._todos.values()
            if document["user_id"] == owner_id
        )
        return dict(counts)
