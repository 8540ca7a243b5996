"""Google Sign-In adapter.

Implements IdentityProviderPort by handing the ID token to Google's
tokeninfo endpoint, which checks the signature and expiry. The audience and
issuer are checked here against the configured client ID.

API Documentation: https://developers.google.com/identity/sign-in/web/backend-auth
"""

import logging
import os

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from domain.model.errors import ErrorKind
from domain.model.identity import FederatedProfile
from domain.model.result import Err, Ok, Result
from domain.model.user import AuthProvider

logger = logging.getLogger(__name__)

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_ISSUERS = {"accounts.google.com", "https://accounts.google.com"}
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
API_TIMEOUT_SECONDS = 5.0

_REJECTED = Err(ErrorKind.UPSTREAM_VERIFICATION_FAILED, "Invalid Google token")
_UNAVAILABLE = Err(ErrorKind.PROVIDER_UNAVAILABLE, "Google sign-in is temporarily unavailable")


class GoogleIdentityAdapter:
    """Verifies Google ID tokens and maps their claims to a FederatedProfile."""

    def __init__(
        self,
        client_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id or GOOGLE_CLIENT_ID
        self._transport = transport

    async def verify_assertion(self, assertion: str) -> Result[FederatedProfile]:
        if not self.client_id:
            logger.error("GOOGLE_CLIENT_ID not configured, rejecting Google login")
            return _REJECTED
        if not assertion:
            return _REJECTED

        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS, transport=self._transport) as client:
                response = await _fetch_with_retry(client, assertion)
        except httpx.RequestError as e:
            logger.warning("Google tokeninfo request error", extra={"error_type": type(e).__name__})
            return _UNAVAILABLE

        if response.status_code >= 500:
            logger.warning("Google tokeninfo server error", extra={"status_code": response.status_code})
            return _UNAVAILABLE
        if response.status_code != 200:
            logger.info("Google rejected ID token", extra={"status_code": response.status_code})
            return _REJECTED

        try:
            claims = response.json()
        except ValueError:
            logger.warning("Google tokeninfo returned invalid JSON")
            return _REJECTED

        return self._to_profile(claims)

    def _to_profile(self, claims: dict) -> Result[FederatedProfile]:
        if claims.get("aud") != self.client_id:
            logger.warning("Google ID token audience mismatch", extra={"aud": claims.get("aud")})
            return _REJECTED
        if claims.get("iss") not in GOOGLE_ISSUERS:
            logger.warning("Google ID token issuer mismatch", extra={"iss": claims.get("iss")})
            return _REJECTED
        if not claims.get("sub") or not claims.get("email"):
            return _REJECTED

        return Ok(FederatedProfile(
            provider=AuthProvider.GOOGLE.value,
            subject_id=claims["sub"],
            email=claims["email"].lower(),
            email_verified_by_provider=_as_bool(claims.get("email_verified")),
            name=claims.get("name"),
            picture=claims.get("picture"),
        ))


def _as_bool(value) -> bool:
    """tokeninfo returns booleans as the strings "true"/"false"."""
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


# ── HTTP helpers ─────────────────────────────────────────────


@retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    reraise=True,
)
async def _fetch_with_retry(client: httpx.AsyncClient, id_token: str) -> httpx.Response:
    """Call tokeninfo with automatic retry on transient failures."""
    return await client.get(GOOGLE_TOKENINFO_URL, params={"id_token": id_token})
