"""Storage backends for users and todos."""

from .base import TodoRepository, UserRepository, store_errors
from .todo_repository import InMemoryTodoRepository, MongoTodoRepository
from .user_repository import InMemoryUserRepository, MongoUserRepository

__all__ = [
    "InMemoryTodoRepository",
    "InMemoryUserRepository",
    "MongoTodoRepository",
    "MongoUserRepository",
    "TodoRepository",
    "UserRepository",
    "store_errors",
]
