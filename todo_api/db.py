"""MongoDB connection management.

Smoke check:
  - Without MONGODB_URI: start the app, register, POST /api/todos, restart;
    the todo is gone (in-memory store).
  - With MONGODB_URI set: same steps, the todo survives the restart.
"""

from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
TODOS_COLLECTION = "todos"

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


def is_enabled() -> bool:
    return _database is not None


async def init_db(uri: str, db_name: str, *, timeout_ms: int = 5000) -> AsyncIOMotorDatabase:
    global _client, _database

    if _database is not None:
        return _database

    _client = AsyncIOMotorClient(uri, tz_aware=True, timeoutMS=timeout_ms)
    _database = _client[db_name]
    await _client.admin.command("ping")
    await ensure_indexes(_database)
    logger.info("Connected to MongoDB database=%s", db_name)
    return _database


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    users = database[USERS_COLLECTION]
    await users.create_index([("email", ASCENDING)], unique=True, name="uniq_email")
    await users.create_index([("username", ASCENDING)], unique=True, name="uniq_username")
    todos = database[TODOS_COLLECTION]
    await todos.create_index(
        [("user_id", ASCENDING), ("created_at", DESCENDING)],
        name="owner_created_at",
    )


async def close_db() -> None:
    global _client, _database

    if _client is not None:
        _client.close()
        logger.info("MongoDB connection closed")
    _client = None
    _database = None
