"""Todo service: owner-scoped CRUD over the todo store.

Every single-item operation loads the todo and passes it through
authorization_service.authorize() before touching it.
"""

import logging
from datetime import datetime

from domain.model.errors import ErrorKind
from domain.model.result import Err, Ok, Result
from domain.model.todo import Priority, Todo, TodoFilter, TodoSortKey
from domain.model.user import User
from port.todo_repository import TodoRepository
from services.authorization_service import authorize

logger = logging.getLogger(__name__)

_SAVE_FAILED = Err(ErrorKind.STORAGE_FAILURE, "Failed to save todo")


# ── listing contract ─────────────────────────────────────────


def filter_and_sort(
    todos: list[Todo],
    filter_by: TodoFilter = TodoFilter.ALL,
    sort_by: TodoSortKey = TodoSortKey.CREATED_AT,
) -> list[Todo]:
    """Apply the completion filter then the sort order. Does not mutate ``todos``.

    - createdAt: newest first
    - dueDate: earliest first, todos without a due date last
    - priority: high, medium, low
    """
    if filter_by == TodoFilter.ACTIVE:
        results = [t for t in todos if not t.completed]
    elif filter_by == TodoFilter.COMPLETED:
        results = [t for t in todos if t.completed]
    else:
        results = list(todos)

    if sort_by == TodoSortKey.DUE_DATE:
        with_due = sorted((t for t in results if t.due_date), key=lambda t: t.due_date)
        return with_due + [t for t in results if not t.due_date]
    if sort_by == TodoSortKey.PRIORITY:
        return sorted(results, key=lambda t: t.priority.weight, reverse=True)
    return sorted(results, key=lambda t: t.created_at, reverse=True)


# ── operations ───────────────────────────────────────────────


def list_todos(
    repo: TodoRepository,
    identity: User,
    filter_by: TodoFilter = TodoFilter.ALL,
    sort_by: TodoSortKey = TodoSortKey.CREATED_AT,
) -> list[Todo]:
    return filter_and_sort(repo.find_by_owner(identity.id), filter_by, sort_by)


def create_todo(
    repo: TodoRepository,
    identity: User,
    title: str,
    description: str | None = None,
    priority: Priority | None = None,
    due_date: datetime | None = None,
) -> Result[Todo]:
    if not title or not title.strip():
        return Err(ErrorKind.VALIDATION, "Title is required")

    todo = Todo.create(
        owner_id=identity.id,
        title=title,
        description=description,
        priority=priority,
        due_date=due_date,
    )
    if not repo.save(todo):
        return _SAVE_FAILED

    logger.info("Todo created", extra={"userId": identity.id, "todoId": todo.id})
    return Ok(todo)


def get_todo(repo: TodoRepository, identity: User, todo_id: str) -> Result[Todo]:
    return authorize(identity, repo.get_by_id(todo_id))


def update_todo(
    repo: TodoRepository,
    identity: User,
    todo_id: str,
    title: str | None = None,
    description: str | None = None,
    completed: bool | None = None,
    priority: Priority | None = None,
    due_date: datetime | None = None,
) -> Result[Todo]:
    authorized = authorize(identity, repo.get_by_id(todo_id))
    if isinstance(authorized, Err):
        return authorized
    todo = authorized.value

    todo.apply_update(
        title=title,
        description=description,
        completed=completed,
        priority=priority,
        due_date=due_date,
    )
    if not repo.save(todo):
        return _SAVE_FAILED
    return Ok(todo)


def toggle_todo(repo: TodoRepository, identity: User, todo_id: str) -> Result[Todo]:
    authorized = authorize(identity, repo.get_by_id(todo_id))
    if isinstance(authorized, Err):
        return authorized
    todo = authorized.value

    todo.toggle()
    if not repo.save(todo):
        return _SAVE_FAILED
    return Ok(todo)


def delete_todo(repo: TodoRepository, identity: User, todo_id: str) -> Result[str]:
    authorized = authorize(identity, repo.get_by_id(todo_id))
    if isinstance(authorized, Err):
        return authorized

    if not repo.delete(todo_id):
        return Err(ErrorKind.STORAGE_FAILURE, "Failed to delete todo")

    logger.info("Todo deleted", extra={"userId": identity.id, "todoId": todo_id})
    return Ok(todo_id)
