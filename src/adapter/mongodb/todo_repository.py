"""MongoDB implementation of TodoRepository."""

from logging import getLogger

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import TODOS_COLLECTION_NAME
from domain.model.todo import Priority, Todo

logger = getLogger(__name__)


class MongoTodoRepository:
    def __init__(self, db: Database):
        self.collection = db[TODOS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for todos collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection, [('owner_id', 1), ('created_at', -1)], 'idx_todos_owner_created_at',
            )
            return True
        except PyMongoError as e:
            logger.error("Failed to create todos indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Todo:
        """Convert MongoDB document to Todo domain model."""
        return Todo(
            id=doc['_id'],
            owner_id=doc['owner_id'],
            title=doc['title'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            description=doc.get('description'),
            completed=doc.get('completed', False),
            priority=Priority(doc.get('priority', Priority.MEDIUM.value)),
            due_date=doc.get('due_date'),
        )

    # ── write operations ─────────────────────────────────────

    def save(self, todo: Todo) -> bool:
        """Save entire Todo (upsert). owner_id is written on insert only."""
        try:
            doc = {
                'title': todo.title,
                'description': todo.description,
                'completed': todo.completed,
                'priority': todo.priority.value,
                'due_date': todo.due_date,
                'updated_at': todo.updated_at,
            }

            self.collection.update_one(
                {'_id': todo.id},
                {
                    '$set': doc,
                    '$setOnInsert': {
                        '_id': todo.id,
                        'owner_id': todo.owner_id,
                        'created_at': todo.created_at,
                    },
                },
                upsert=True,
            )

            logger.debug("Todo saved", extra={"todoId": todo.id})
            return True
        except PyMongoError as e:
            logger.error("Failed to save todo", extra={"todoId": todo.id, "error": str(e)})
            return False

    def delete(self, todo_id: str) -> bool:
        """Hard delete a todo."""
        try:
            result = self.collection.delete_one({'_id': todo_id})

            if result.deleted_count == 0:
                logger.warning("Todo not found for deletion", extra={"todoId": todo_id})
                return False

            logger.info("Todo deleted", extra={"todoId": todo_id})
            return True
        except PyMongoError as e:
            logger.error("Failed to delete todo", extra={"todoId": todo_id, "error": str(e)})
            return False

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, todo_id: str) -> Todo | None:
        """Retrieve todo by ID."""
        try:
            doc = self.collection.find_one({'_id': todo_id})
            if doc:
                return self._to_domain(doc)
            return None
        except PyMongoError as e:
            logger.error("Failed to retrieve todo", extra={"todoId": todo_id, "error": str(e)})
            return None

    def find_by_owner(self, owner_id: str) -> list[Todo]:
        """List a user's todos, newest first."""
        try:
            docs = self.collection.find({'owner_id': owner_id}).sort('created_at', -1)
            todos = [self._to_domain(doc) for doc in docs]
            logger.debug("Listed todos", extra={"userId": owner_id, "count": len(todos)})
            return todos
        except PyMongoError as e:
            logger.error("Failed to list todos", extra={"userId": owner_id, "error": str(e)})
            return []
