"""Tests for FakeUserRepository: the conditional consume semantics the services rely on."""

import unittest
from datetime import datetime, timedelta, timezone

from adapter.fake.user_repository import FakeUserRepository
from domain.model.user import User


class TestFakeUserRepository(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = User.create(name="Ada", email="ada@example.com")
        self.repo.create(self.user)
        self.expires = datetime.now(timezone.utc) + timedelta(hours=1)

    def test_create_rejects_duplicate_email(self):
        self.assertIsNone(self.repo.create(User.create(name="Other", email="ada@example.com")))

    def test_consume_requires_current_secret(self):
        self.repo.set_email_verification(self.user.id, "first", self.expires)
        self.repo.set_email_verification(self.user.id, "second", self.expires)

        self.assertFalse(self.repo.consume_email_verification(self.user.id, "first"))
        self.assertTrue(self.repo.consume_email_verification(self.user.id, "second"))
        self.assertFalse(self.repo.consume_email_verification(self.user.id, "second"))
        self.assertTrue(self.repo.get_by_id(self.user.id).email_verified)

    def test_lookup_by_secret_and_phone(self):
        self.repo.set_email_verification(self.user.id, "abc", self.expires)
        self.repo.set_phone_verification(self.user.id, "123456", self.expires, phone_number="+15550100")

        self.assertEqual(self.repo.get_by_email_verification_secret("abc").id, self.user.id)
        self.assertEqual(self.repo.get_by_phone_number("+15550100").id, self.user.id)

    def test_phone_number_is_settable_once(self):
        self.repo.set_phone_verification(self.user.id, "111111", self.expires, phone_number="+15550100")
        self.repo.set_phone_verification(self.user.id, "222222", self.expires, phone_number="+15550199")

        stored = self.repo.get_by_id(self.user.id)
        self.assertEqual(stored.phone_number, "+15550100")
        self.assertEqual(stored.phone_verification_code, "222222")
        self.assertIsNone(self.repo.get_by_phone_number("+15550199"))

    def test_link_federated_identity(self):
        linked = self.repo.link_federated_identity(self.user.id, "google", "g-1", avatar="https://img")

        self.assertTrue(linked.email_verified)
        self.assertEqual(linked.federated_id, "g-1")
        self.assertIsNone(self.repo.link_federated_identity("missing", "google", "g-1"))


if __name__ == '__main__':
    unittest.main()
