# domain/model/user.py

import hmac
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class AuthProvider(str, Enum):
    """Channel the account was first created through or last linked to."""
    EMAIL = 'email'
    GOOGLE = 'google'


@dataclass
class User:
    """Domain model representing a user account."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None
    password_hash: str | None = None
    provider: str = AuthProvider.EMAIL.value
    federated_id: str | None = None
    avatar: str | None = None

    phone_number: str | None = None
    email_verified: bool = False
    phone_verified: bool = False

    email_verification_secret: str | None = None
    email_verification_expires_at: datetime | None = None
    phone_verification_code: str | None = None
    phone_verification_expires_at: datetime | None = None

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(
        name: str,
        email: str,
        password_hash: str | None = None,
        phone_number: str | None = None,
        provider: str = AuthProvider.EMAIL.value,
        federated_id: str | None = None,
        avatar: str | None = None,
        email_verified: bool = False,
    ) -> 'User':
        """Create a new, not yet persisted User with a generated ID."""
        now = datetime.now(timezone.utc)
        return User(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
            provider=provider,
            federated_id=federated_id,
            avatar=avatar,
            phone_number=phone_number,
            email_verified=email_verified,
        )

    # ── queries ───────────────────────────────────────────

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def email_secret_matches(self, secret: str, now: datetime) -> bool:
        """True while the pending email secret equals ``secret`` and has not expired."""
        return _pending_matches(
            self.email_verification_secret, self.email_verification_expires_at, secret, now,
        )

    def phone_code_matches(self, code: str, now: datetime) -> bool:
        """True while the pending phone code equals ``code`` and has not expired."""
        return _pending_matches(
            self.phone_verification_code, self.phone_verification_expires_at, code, now,
        )


def _pending_matches(
    stored: str | None,
    expires_at: datetime | None,
    supplied: str,
    now: datetime,
) -> bool:
    if stored is None or expires_at is None:
        return False
    if not hmac.compare_digest(stored.encode('utf-8'), supplied.encode('utf-8')):
        return False
    return now < expires_at
