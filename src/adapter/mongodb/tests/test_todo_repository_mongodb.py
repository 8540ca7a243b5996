"""Tests for MongoTodoRepository against a mocked collection."""

import unittest
from unittest.mock import MagicMock
from datetime import datetime, timezone
from pymongo.errors import PyMongoError

from adapter.mongodb.todo_repository import MongoTodoRepository
from domain.model.todo import Priority, Todo


def _make_repo():
    mock_collection = MagicMock()
    mock_db = MagicMock()
    mock_db.__getitem__.return_value = mock_collection
    return MongoTodoRepository(mock_db), mock_collection


class TestMongoTodoRepository(unittest.TestCase):

    def test_save_writes_owner_on_insert_only(self):
        repo, collection = _make_repo()
        todo = Todo.create(owner_id='user-1', title='Buy milk', priority=Priority.HIGH)

        self.assertTrue(repo.save(todo))

        query, update = collection.update_one.call_args[0]
        self.assertEqual(query, {'_id': todo.id})
        self.assertNotIn('owner_id', update['$set'])
        self.assertEqual(update['$set']['priority'], 'high')
        self.assertEqual(update['$setOnInsert']['owner_id'], 'user-1')
        self.assertTrue(collection.update_one.call_args[1]['upsert'])

    def test_save_error(self):
        repo, collection = _make_repo()
        collection.update_one.side_effect = PyMongoError("down")

        self.assertFalse(repo.save(Todo.create(owner_id='user-1', title='Buy milk')))

    def test_find_by_owner_newest_first(self):
        repo, collection = _make_repo()
        now = datetime.now(timezone.utc)
        collection.find.return_value.sort.return_value = [
            {'_id': 't1', 'owner_id': 'user-1', 'title': 'A', 'created_at': now, 'updated_at': now,
             'priority': 'low', 'completed': True},
        ]

        todos = repo.find_by_owner('user-1')

        collection.find.assert_called_once_with({'owner_id': 'user-1'})
        collection.find.return_value.sort.assert_called_once_with('created_at', -1)
        self.assertEqual(todos[0].priority, Priority.LOW)
        self.assertTrue(todos[0].completed)

    def test_delete_missing(self):
        repo, collection = _make_repo()
        collection.delete_one.return_value = MagicMock(deleted_count=0)

        self.assertFalse(repo.delete('t1'))


if __name__ == '__main__':
    unittest.main()
