"""API routes for todo management. Every route requires a bearer token."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import get_current_user
from ..models import Todo, TodoCreate, TodoPage, TodoStats, TodoUpdate, User
from ..models.todo import ApiModel
from ..services.todo_service import TodoService
from .dependencies import get_todo_service

router = APIRouter(prefix="/api/todos", tags=["todos"])


class TodoResponse(ApiModel):
    success: bool = True
    data: Todo


class TodoListResponse(ApiModel):
    success: bool = True
    count: int
    data: TodoPage


class TodoStatsResponse(ApiModel):
    success: bool = True
    data: TodoStats


class MessageResponse(ApiModel):
    success: bool = True
    message: str


@router.get("", response_model=TodoListResponse)
async def get_todos(
    search: Optional[str] = Query(None, description="Case-insensitive match on title or description"),
    completed: Optional[str] = Query(None, description="true or false"),
    priority: Optional[str] = Query(None, description="low, medium or high"),
    category: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size, at most 100"),
    user: User = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> TodoListResponse:
    """List the caller's todos with filters, sorting and pagination."""
    result = await service.list_todos(
        user.id,
        search=search,
        completed=completed,
        priority=priority,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return TodoListResponse(count=len(result.todos), data=result)


@router.get("/stats", response_model=TodoStatsResponse)
async def get_todo_stats(
    user: User = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> TodoStatsResponse:
    """Counts by completion, priority and category."""
    return TodoStatsResponse(data=await service.get_stats(user.id))


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    todo_id: str,
    user: User = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    return TodoResponse(data=await service.get_todo(user.id, todo_id))


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    todo_data: TodoCreate,
    user: User = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    return TodoResponse(data=await service.create_todo(user.id, todo_data))


@router.put("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: str,
    todo_data: TodoUpdate,
    user: User = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    """Partial update: only the fields present in the body change."""
    return TodoResponse(data=await service.update_todo(user.id, todo_id, todo_data))


@router.delete("/{todo_id}", response_model=MessageResponse)
async def delete_todo(
    todo_id: str,
    user: User = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> MessageResponse:
    await service.delete_todo(user.id, todo_id)
    return MessageResponse(message="Todo removed")


@router.patch("/{todo_id}/toggle", response_model=TodoResponse)
async def toggle_todo(
    todo_id: str,
    user: User = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    return TodoResponse(data=await service.toggle_todo(user.id, todo_id))
