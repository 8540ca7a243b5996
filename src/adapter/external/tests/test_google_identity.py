"""Tests for the Google ID token adapter using httpx.MockTransport."""

import unittest

import httpx

from adapter.external.google_identity import GOOGLE_TOKENINFO_URL, GoogleIdentityAdapter
from domain.model.errors import ErrorKind
from domain.model.result import Ok

CLIENT_ID = "client-123.apps.googleusercontent.com"


def _claims(**overrides) -> dict:
    claims = {
        "aud": CLIENT_ID,
        "iss": "https://accounts.google.com",
        "sub": "g-1",
        "email": "Ada@Example.com",
        "email_verified": "true",
        "name": "Ada Lovelace",
        "picture": "https://img/ada.png",
    }
    claims.update(overrides)
    return claims


def _adapter(handler) -> GoogleIdentityAdapter:
    return GoogleIdentityAdapter(client_id=CLIENT_ID, transport=httpx.MockTransport(handler))


class TestGoogleIdentityAdapter(unittest.IsolatedAsyncioTestCase):

    async def test_valid_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = f"{request.url.scheme}://{request.url.host}{request.url.path}"
            seen["id_token"] = request.url.params["id_token"]
            return httpx.Response(200, json=_claims())

        result = await _adapter(handler).verify_assertion("id-token")

        self.assertIsInstance(result, Ok)
        profile = result.value
        self.assertEqual(profile.provider, "google")
        self.assertEqual(profile.subject_id, "g-1")
        self.assertEqual(profile.email, "ada@example.com")
        self.assertTrue(profile.email_verified_by_provider)
        self.assertEqual(seen, {"url": GOOGLE_TOKENINFO_URL, "id_token": "id-token"})

    async def test_unverified_email_flag(self):
        result = await _adapter(lambda r: httpx.Response(200, json=_claims(email_verified="false"))).verify_assertion("t")

        self.assertFalse(result.value.email_verified_by_provider)

    async def test_audience_mismatch(self):
        result = await _adapter(lambda r: httpx.Response(200, json=_claims(aud="someone-else"))).verify_assertion("t")

        self.assertEqual(result.kind, ErrorKind.UPSTREAM_VERIFICATION_FAILED)

    async def test_issuer_mismatch(self):
        result = await _adapter(lambda r: httpx.Response(200, json=_claims(iss="evil.example.com"))).verify_assertion("t")

        self.assertEqual(result.kind, ErrorKind.UPSTREAM_VERIFICATION_FAILED)

    async def test_rejected_by_google(self):
        result = await _adapter(lambda r: httpx.Response(400, json={"error": "invalid_token"})).verify_assertion("t")

        self.assertEqual(result.kind, ErrorKind.UPSTREAM_VERIFICATION_FAILED)

    async def test_google_server_error(self):
        result = await _adapter(lambda r: httpx.Response(503)).verify_assertion("t")

        self.assertEqual(result.kind, ErrorKind.PROVIDER_UNAVAILABLE)

    async def test_network_error(self):
        def handler(request):
            raise httpx.ReadError("connection reset", request=request)

        result = await _adapter(handler).verify_assertion("t")

        self.assertEqual(result.kind, ErrorKind.PROVIDER_UNAVAILABLE)

    async def test_missing_client_id_rejects(self):
        adapter = GoogleIdentityAdapter(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=_claims())))
        adapter.client_id = None

        result = await adapter.verify_assertion("t")

        self.assertEqual(result.kind, ErrorKind.UPSTREAM_VERIFICATION_FAILED)


if __name__ == '__main__':
    unittest.main()
