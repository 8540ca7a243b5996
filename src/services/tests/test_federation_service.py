"""Tests for federated (Google) login: create, merge by email and failure paths."""

import unittest
from unittest.mock import patch

from adapter.fake.identity_provider import FakeIdentityProvider
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import ErrorKind
from domain.model.result import Ok
from domain.model.user import AuthProvider, User
from services import federation_service
from services.token_service import TokenIssuer


class TestFederatedLogin(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.tokens = TokenIssuer("unit-test-secret")
        self.provider = FakeIdentityProvider()

    async def test_creates_verified_account_without_password(self):
        self.provider.register("id-token", "ada@example.com", subject_id="g-1", picture="https://img/ada.png")

        result = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")

        self.assertIsInstance(result, Ok)
        user = result.value.user
        self.assertTrue(user.email_verified)
        self.assertFalse(user.has_password)
        self.assertEqual(user.provider, AuthProvider.GOOGLE.value)
        self.assertEqual(user.federated_id, "g-1")
        self.assertEqual(user.avatar, "https://img/ada.png")
        self.assertEqual(self.tokens.validate(result.value.token).value, user.id)

    async def test_second_login_reuses_account(self):
        self.provider.register("id-token", "ada@example.com")

        first = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")
        second = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")

        self.assertEqual(first.value.user.id, second.value.user.id)
        self.assertEqual(len(self.repo.store), 1)

    async def test_merges_into_unverified_password_account(self):
        existing = User.create(name="Ada", email="ada@example.com", password_hash="hash")
        self.repo.create(existing)
        self.provider.register("id-token", "Ada@Example.com", subject_id="g-1")

        with self.assertLogs('services.federation_service', level='WARNING'):
            result = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")

        user = result.value.user
        self.assertEqual(user.id, existing.id)
        self.assertTrue(user.email_verified)
        self.assertEqual(user.password_hash, "hash")
        self.assertEqual(user.federated_id, "g-1")
        self.assertEqual(len(self.repo.store), 1)

    async def test_name_falls_back_to_email_local_part(self):
        self.provider.register("id-token", "ada@example.com", name=None)

        result = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")

        self.assertEqual(result.value.user.name, "ada")

    async def test_unverified_provider_email(self):
        self.provider.register("id-token", "ada@example.com", email_verified=False)

        result = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")

        self.assertEqual(result.kind, ErrorKind.UNVERIFIED_PROVIDER_EMAIL)
        self.assertEqual(result.message, "Google email not verified")
        self.assertEqual(self.repo.store, {})

    async def test_rejected_assertion(self):
        result = await federation_service.login(self.repo, self.tokens, self.provider, "forged")

        self.assertEqual(result.kind, ErrorKind.UPSTREAM_VERIFICATION_FAILED)

    async def test_provider_unavailable(self):
        self.provider.unavailable = True

        result = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")

        self.assertEqual(result.kind, ErrorKind.PROVIDER_UNAVAILABLE)

    async def test_create_race_links_the_winner(self):
        """A concurrent registration wins the insert; login links to that account instead."""
        self.provider.register("id-token", "ada@example.com", subject_id="g-1")
        winner = User.create(name="Ada", email="ada@example.com", password_hash="hash")

        def lose_race(user):
            self.repo.store[winner.id] = winner
            return None

        with patch.object(self.repo, 'create', side_effect=lose_race):
            result = await federation_service.login(self.repo, self.tokens, self.provider, "id-token")

        self.assertEqual(result.value.user.id, winner.id)
        self.assertEqual(result.value.user.federated_id, "g-1")


if __name__ == '__main__':
    unittest.main()
