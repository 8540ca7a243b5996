"""Port definition for TodoRepository."""

from typing import Protocol

from domain.model.todo import Todo


class TodoRepository(Protocol):
    def save(self, todo: Todo) -> bool: ...

    def get_by_id(self, todo_id: str) -> Todo | None: ...

    def find_by_owner(self, owner_id: str) -> list[Todo]:
        """All todos of ``owner_id``, newest first."""
        ...

    def delete(self, todo_id: str) -> bool: ...
