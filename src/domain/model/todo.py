# domain/model/todo.py

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class Priority(str, Enum):
    """Todo priority levels."""
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class TodoFilter(str, Enum):
    """Completion filter applied when listing todos."""
    ALL = 'all'
    ACTIVE = 'active'
    COMPLETED = 'completed'


class TodoSortKey(str, Enum):
    """Sort order applied when listing todos."""
    CREATED_AT = 'createdAt'
    DUE_DATE = 'dueDate'
    PRIORITY = 'priority'


@dataclass
class Todo:
    """Domain model representing a todo item owned by exactly one user."""
    id: str
    owner_id: str
    title: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(
        owner_id: str,
        title: str,
        description: str | None = None,
        priority: Priority | None = None,
        due_date: datetime | None = None,
    ) -> 'Todo':
        """Create a new Todo for ``owner_id`` with a generated ID."""
        now = datetime.now(timezone.utc)
        return Todo(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            title=title.strip(),
            description=description.strip() if description else description,
            priority=priority or Priority.MEDIUM,
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )

    # ── queries ───────────────────────────────────────────

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    # ── state transitions ─────────────────────────────────

    def apply_update(
        self,
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
        priority: Priority | None = None,
        due_date: datetime | None = None,
    ) -> None:
        """Merge a partial update. Empty values keep the current field, owner never changes."""
        if title and title.strip():
            self.title = title.strip()
        if description is not None:
            self.description = description.strip()
        if completed is not None:
            self.completed = completed
        if priority:
            self.priority = priority
        if due_date:
            self.due_date = due_date
        self.updated_at = datetime.now(timezone.utc)

    def toggle(self) -> None:
        """Flip the completion flag."""
        self.completed = not self.completed
        self.updated_at = datetime.now(timezone.utc)
