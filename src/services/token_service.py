"""Session token issuance and validation.

Tokens are stateless HS256 JWTs. Validation never touches storage and there is
no revocation list: logging out means the client discards its token, and a
token stays valid until it expires. Each token carries a ``jti`` so a denylist
keyed on it can be added later without changing issue()/validate().
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from jose import jws, jwt
from jose.exceptions import (
    ExpiredSignatureError,
    JWSError,
    JWTError,
)

from domain.model.errors import ErrorKind
from domain.model.identity import TokenClaims
from domain.model.result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "HS256"
DEFAULT_LIFETIME = timedelta(days=30)


class TokenIssuer:
    """Signs and validates session tokens with an injected secret key."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        lifetime: timedelta = DEFAULT_LIFETIME,
    ):
        if not secret_key:
            raise ValueError("TokenIssuer requires a non-empty secret key")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, user_id: str, issued_at: datetime | None = None) -> str:
        """Create a signed token binding ``user_id``, issue time and expiry."""
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Result[TokenClaims]:
        """Check signature, then expiry, and return the bound claims."""
        if not token or token.count(".") != 2:
            return Err(ErrorKind.TOKEN_MALFORMED, "Malformed token")

        try:
            header = jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as e:
            logger.debug(f"Token rejected as malformed: {e}")
            return Err(ErrorKind.TOKEN_MALFORMED, "Malformed token")
        if header.get("alg") != self.algorithm:
            return Err(ErrorKind.TOKEN_MALFORMED, "Malformed token")

        # Structure is sound, so any verification failure is down to the signature
        try:
            jws.verify(token, self._secret_key, algorithms=[self.algorithm])
        except JWSError:
            return Err(ErrorKind.TOKEN_SIGNATURE_INVALID, "Invalid token signature")

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return Err(ErrorKind.TOKEN_EXPIRED, "Token has expired")
        except JWTError as e:
            logger.debug(f"Token claims rejected: {e}")
            return Err(ErrorKind.TOKEN_MALFORMED, "Malformed token")

        user_id = payload.get("sub")
        if not user_id or "exp" not in payload:
            return Err(ErrorKind.TOKEN_MALFORMED, "Malformed token")

        return Ok(TokenClaims(
            user_id=user_id,
            token_id=payload.get("jti", ""),
            issued_at=payload.get("iat", 0),
            expires_at=payload["exp"],
        ))

    def validate(self, token: str) -> Result[str]:
        """Validate ``token`` and return the user id it is bound to."""
        result = self.decode(token)
        if isinstance(result, Err):
            return result
        return Ok(result.value.user_id)
