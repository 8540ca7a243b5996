"""In-memory implementation of TodoRepository for testing."""

from domain.model.todo import Todo


class FakeTodoRepository:
    def __init__(self):
        self.store: dict[str, Todo] = {}

    # ── write operations ─────────────────────────────────────

    def save(self, todo: Todo) -> bool:
        existing = self.store.get(todo.id)
        if existing and existing.owner_id != todo.owner_id:
            return False

        self.store[todo.id] = todo
        return True

    def delete(self, todo_id: str) -> bool:
        return self.store.pop(todo_id, None) is not None

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, todo_id: str) -> Todo | None:
        return self.store.get(todo_id)

    def find_by_owner(self, owner_id: str) -> list[Todo]:
        results = [t for t in self.store.values() if t.owner_id == owner_id]
        results.sort(key=lambda t: t.created_at, reverse=True)
        return results
