from datetime import datetime
from typing import Protocol

from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Every mutation is a partial update of the named fields only, so two
    requests touching disjoint fields of one user do not overwrite each other.
    """
    def create(self, user: User) -> User | None:
        """Persist a new user. Return None if the email is taken or the write failed."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_phone_number(self, phone_number: str) -> User | None:
        """Find a user by stored phone number. Return User or None if not found."""
        ...

    def get_by_email_verification_secret(self, secret: str) -> User | None:
        """Find the user holding ``secret`` as pending email secret."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...

    def set_email_verification(self, user_id: str, secret: str, expires_at: datetime) -> bool:
        """Store a pending email secret, replacing any previous one."""
        ...

    def consume_email_verification(self, user_id: str, secret: str) -> bool:
        """Mark email verified and clear the secret, only if ``secret`` is still the pending one."""
        ...

    def set_phone_verification(
        self,
        user_id: str,
        code: str,
        expires_at: datetime,
        phone_number: str | None = None,
    ) -> bool:
        """Store a pending phone code, replacing any previous one.

        ``phone_number`` is assigned only when the user has none yet; an
        existing number is never overwritten.
        """
        ...

    def consume_phone_verification(self, user_id: str, code: str) -> bool:
        """Mark phone verified and clear the code, only if ``code`` is still the pending one."""
        ...

    def link_federated_identity(
        self,
        user_id: str,
        provider: str,
        federated_id: str,
        avatar: str | None = None,
    ) -> User | None:
        """Attach a provider subject, force email_verified. Return the updated user."""
        ...
