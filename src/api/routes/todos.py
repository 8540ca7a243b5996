"""Todo API routes. Every endpoint requires a bearer token.

Endpoints:
- GET /todos: List the caller's todos (filter + sort)
- POST /todos: Create a todo owned by the caller
- GET/PUT/DELETE /todos/{id}: Read, update, delete one todo
- PATCH /todos/{id}/toggle: Flip completion

Single-item endpoints answer 404 for unknown ids and 403 for todos owned by
someone else, in that order.
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_todo_repo
from api.errors import unwrap
from api.models import (
    MessageResponse,
    TodoCreateRequest,
    TodoResponse,
    TodoUpdateRequest,
)
from api.security import get_current_user_required
from domain.model.todo import TodoFilter, TodoSortKey
from domain.model.user import User
from port.todo_repository import TodoRepository
from services import todo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    filter_by: TodoFilter = Query(TodoFilter.ALL, alias="filter"),
    sort_by: TodoSortKey = Query(TodoSortKey.CREATED_AT, alias="sortBy"),
    current_user: User = Depends(get_current_user_required),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """List the caller's todos. Newest first unless another sort is requested."""
    todos = todo_service.list_todos(repo, current_user, filter_by, sort_by)
    return [TodoResponse.from_domain(t) for t in todos]


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    request: TodoCreateRequest,
    current_user: User = Depends(get_current_user_required),
    repo: TodoRepository = Depends(get_todo_repo),
):
    todo = unwrap(todo_service.create_todo(
        repo,
        current_user,
        title=request.title,
        description=request.description,
        priority=request.priority,
        due_date=request.due_date,
    ))
    return TodoResponse.from_domain(todo)


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    todo_id: str,
    current_user: User = Depends(get_current_user_required),
    repo: TodoRepository = Depends(get_todo_repo),
):
    return TodoResponse.from_domain(unwrap(todo_service.get_todo(repo, current_user, todo_id)))


@router.put("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: str,
    request: TodoUpdateRequest,
    current_user: User = Depends(get_current_user_required),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """Partial update: omitted or empty fields keep their current value."""
    todo = unwrap(todo_service.update_todo(
        repo,
        current_user,
        todo_id,
        title=request.title,
        description=request.description,
        completed=request.completed,
        priority=request.priority,
        due_date=request.due_date,
    ))
    return TodoResponse.from_domain(todo)


@router.patch("/{todo_id}/toggle", response_model=TodoResponse)
async def toggle_todo(
    todo_id: str,
    current_user: User = Depends(get_current_user_required),
    repo: TodoRepository = Depends(get_todo_repo),
):
    return TodoResponse.from_domain(unwrap(todo_service.toggle_todo(repo, current_user, todo_id)))


@router.delete("/{todo_id}", response_model=MessageResponse)
async def delete_todo(
    todo_id: str,
    current_user: User = Depends(get_current_user_required),
    repo: TodoRepository = Depends(get_todo_repo),
):
    unwrap(todo_service.delete_todo(repo, current_user, todo_id))
    return MessageResponse(message="Todo removed")
