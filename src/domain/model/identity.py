# domain/model/identity.py

from dataclasses import dataclass

from domain.model.user import User


@dataclass(frozen=True)
class FederatedProfile:
    """Verified identity asserted by an external provider.

    ``provider`` tags the variant; new providers add a tag value, not a new shape.
    """
    provider: str
    subject_id: str
    email: str
    email_verified_by_provider: bool
    name: str | None = None
    picture: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """A resolved identity together with a freshly minted session token."""
    user: User
    token: str


@dataclass(frozen=True)
class TokenClaims:
    """Claims bound into a session token."""
    user_id: str
    token_id: str
    issued_at: int
    expires_at: int


@dataclass(frozen=True)
class PhoneVerificationIssued:
    """Outcome of issuing a phone code. The code is handed to the SMS notifier."""
    user: User
    code: str
