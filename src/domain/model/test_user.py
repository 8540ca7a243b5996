"""Unit tests for User domain model: pending secret matching and factory."""

import unittest
from datetime import datetime, timedelta, timezone

from domain.model.user import AuthProvider, User


def _user_with_email_secret(secret: str, expires_at: datetime) -> User:
    user = User.create(name="Ada", email="ada@example.com", password_hash="hash")
    user.email_verification_secret = secret
    user.email_verification_expires_at = expires_at
    return user


class TestUserCreate(unittest.TestCase):

    def test_create_defaults(self):
        """New accounts start unverified on the email provider."""
        user = User.create(name="Ada", email="ada@example.com")

        self.assertEqual(len(user.id), 32)
        self.assertEqual(user.provider, AuthProvider.EMAIL.value)
        self.assertFalse(user.email_verified)
        self.assertFalse(user.phone_verified)
        self.assertFalse(user.has_password)
        self.assertEqual(user.created_at, user.updated_at)

    def test_create_generates_unique_ids(self):
        a = User.create(name="Ada", email="a@example.com")
        b = User.create(name="Bob", email="b@example.com")
        self.assertNotEqual(a.id, b.id)


class TestPendingSecretMatching(unittest.TestCase):
    """email_secret_matches / phone_code_matches used by the verification service."""

    def setUp(self):
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_matching_unexpired_secret(self):
        user = _user_with_email_secret("abc123", self.now + timedelta(hours=1))
        self.assertTrue(user.email_secret_matches("abc123", self.now))

    def test_wrong_secret(self):
        user = _user_with_email_secret("abc123", self.now + timedelta(hours=1))
        self.assertFalse(user.email_secret_matches("abc124", self.now))

    def test_expired_secret(self):
        user = _user_with_email_secret("abc123", self.now - timedelta(seconds=1))
        self.assertFalse(user.email_secret_matches("abc123", self.now))

    def test_expiry_instant_is_already_expired(self):
        """A secret is valid only while expiry is strictly in the future."""
        user = _user_with_email_secret("abc123", self.now)
        self.assertFalse(user.email_secret_matches("abc123", self.now))

    def test_no_pending_secret(self):
        user = User.create(name="Ada", email="ada@example.com")
        self.assertFalse(user.email_secret_matches("", self.now))

    def test_phone_code(self):
        user = User.create(name="Ada", email="ada@example.com", phone_number="+15550100")
        user.phone_verification_code = "123456"
        user.phone_verification_expires_at = self.now + timedelta(minutes=10)

        self.assertTrue(user.phone_code_matches("123456", self.now))
        self.assertFalse(user.phone_code_matches("654321", self.now))
        self.assertFalse(user.phone_code_matches("123456", self.now + timedelta(minutes=10)))


if __name__ == '__main__':
    unittest.main()
