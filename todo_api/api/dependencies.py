"""API dependencies for todo management."""

from fastapi import Request

from ..repositories.base import TodoRepository
from ..services.todo_service import TodoService


def get_todo_repository(request: Request) -> TodoRepository:
    """Dependency for getting the todo repository chosen at startup."""
    return request.app.state.todos


def get_todo_service(request: Request) -> TodoService:
    """Dependency for getting todo service instance."""
    return TodoService(get_todo_repository(request))
