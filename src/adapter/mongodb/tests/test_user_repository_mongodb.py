"""Tests for MongoUserRepository against a mocked collection."""

import unittest
from unittest.mock import MagicMock
import sys
from pathlib import Path
from datetime import datetime, timedelta, timezone
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

# Add src to path
# test file is at src/adapter/mongodb/tests/, src is 3 levels up
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from adapter.mongodb import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.user import User


def _make_repo():
    mock_collection = MagicMock()
    mock_db = MagicMock()
    mock_db.__getitem__.return_value = mock_collection
    return MongoUserRepository(mock_db), mock_collection, mock_db


def _user_doc(**overrides) -> dict:
    now = datetime.now(timezone.utc)
    doc = {
        '_id': 'user-1',
        'name': 'Ada',
        'email': 'ada@example.com',
        'password_hash': 'hashed',
        'provider': 'email',
        'email_verified': False,
        'phone_verified': False,
        'created_at': now,
        'updated_at': now,
    }
    doc.update(overrides)
    return doc


class TestCreate(unittest.TestCase):

    def test_create_omits_empty_optional_fields(self):
        repo, collection, db = _make_repo()
        user = User.create(name="Ada", email="ada@example.com", password_hash="hashed")

        self.assertIs(repo.create(user), user)

        db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)
        doc = collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], user.id)
        self.assertEqual(doc['password_hash'], 'hashed')
        self.assertNotIn('phone_number', doc)
        self.assertNotIn('email_verification_secret', doc)

    def test_create_duplicate_returns_none(self):
        repo, collection, _ = _make_repo()
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        self.assertIsNone(repo.create(User.create(name="Ada", email="ada@example.com")))

    def test_create_database_error_returns_none(self):
        repo, collection, _ = _make_repo()
        collection.insert_one.side_effect = PyMongoError("down")

        self.assertIsNone(repo.create(User.create(name="Ada", email="ada@example.com")))


class TestReads(unittest.TestCase):

    def test_get_by_email_maps_document(self):
        repo, collection, _ = _make_repo()
        collection.find_one.return_value = _user_doc(phone_number='+15550100')

        user = repo.get_by_email('ada@example.com')

        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.phone_number, '+15550100')
        self.assertFalse(user.email_verified)
        collection.find_one.assert_called_once_with({'email': 'ada@example.com'})

    def test_get_by_email_verification_secret(self):
        repo, collection, _ = _make_repo()
        collection.find_one.return_value = None

        self.assertIsNone(repo.get_by_email_verification_secret('abc'))
        collection.find_one.assert_called_once_with({'email_verification_secret': 'abc'})

    def test_read_error_returns_none(self):
        repo, collection, _ = _make_repo()
        collection.find_one.side_effect = PyMongoError("down")

        self.assertIsNone(repo.get_by_id('user-1'))


class TestVerificationUpdates(unittest.TestCase):

    def test_consume_email_matches_on_secret(self):
        repo, collection, _ = _make_repo()
        collection.update_one.return_value = MagicMock(matched_count=1)

        self.assertTrue(repo.consume_email_verification('user-1', 'abc'))

        query, update = collection.update_one.call_args[0]
        self.assertEqual(query, {'_id': 'user-1', 'email_verification_secret': 'abc'})
        self.assertTrue(update['$set']['email_verified'])
        self.assertIn('updated_at', update['$set'])
        self.assertEqual(set(update['$unset']), {'email_verification_secret', 'email_verification_expires_at'})

    def test_consume_phone_fails_when_code_already_used(self):
        repo, collection, _ = _make_repo()
        collection.update_one.return_value = MagicMock(matched_count=0)

        self.assertFalse(repo.consume_phone_verification('user-1', '123456'))
        query = collection.update_one.call_args[0][0]
        self.assertEqual(query, {'_id': 'user-1', 'phone_verification_code': '123456'})

    def test_set_phone_verification_assigns_number(self):
        repo, collection, _ = _make_repo()
        collection.update_one.return_value = MagicMock(matched_count=1)
        expires = datetime.now(timezone.utc) + timedelta(minutes=10)

        self.assertTrue(repo.set_phone_verification('user-1', '123456', expires, phone_number='+15550100'))

        code_call, assign_call = collection.update_one.call_args_list
        code_query, code_update = code_call[0]
        self.assertEqual(code_query, {'_id': 'user-1'})
        self.assertEqual(code_update['$set']['phone_verification_code'], '123456')
        self.assertNotIn('phone_number', code_update['$set'])
        assign_query, assign_update = assign_call[0]
        self.assertEqual(assign_query, {'_id': 'user-1', 'phone_number': None})
        self.assertEqual(assign_update['$set']['phone_number'], '+15550100')

    def test_set_phone_verification_keeps_existing_number(self):
        repo, collection, _ = _make_repo()
        collection.update_one.side_effect = [MagicMock(matched_count=1), MagicMock(matched_count=0)]
        expires = datetime.now(timezone.utc) + timedelta(minutes=10)

        self.assertTrue(repo.set_phone_verification('user-1', '123456', expires, phone_number='+15550199'))
        self.assertEqual(collection.update_one.call_count, 2)

    def test_set_phone_verification_without_number_is_single_update(self):
        repo, collection, _ = _make_repo()
        collection.update_one.return_value = MagicMock(matched_count=1)
        expires = datetime.now(timezone.utc) + timedelta(minutes=10)

        repo.set_phone_verification('user-1', '123456', expires)

        collection.update_one.assert_called_once()

    def test_set_phone_verification_unknown_user_skips_assignment(self):
        repo, collection, _ = _make_repo()
        collection.update_one.return_value = MagicMock(matched_count=0)
        expires = datetime.now(timezone.utc) + timedelta(minutes=10)

        self.assertFalse(repo.set_phone_verification('missing', '123456', expires, phone_number='+15550100'))
        collection.update_one.assert_called_once()

    def test_link_federated_identity_returns_updated_user(self):
        repo, collection, _ = _make_repo()
        collection.find_one_and_update.return_value = _user_doc(
            provider='google', federated_id='g-1', email_verified=True,
        )

        user = repo.link_federated_identity('user-1', 'google', 'g-1')

        self.assertTrue(user.email_verified)
        self.assertEqual(user.federated_id, 'g-1')
        kwargs = collection.find_one_and_update.call_args[1]
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)


class TestEnsureIndexes(unittest.TestCase):

    def test_creates_unique_email_index(self):
        repo, collection, _ = _make_repo()

        self.assertTrue(repo.ensure_indexes())

        collection.create_index.assert_any_call([('email', 1)], name='idx_users_email', unique=True)


if __name__ == '__main__':
    unittest.main()
