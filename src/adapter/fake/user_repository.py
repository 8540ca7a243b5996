"""In-memory implementation of UserRepository for testing."""

from datetime import datetime, timezone

from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User | None:
        if any(u.email == user.email for u in self.store.values()):
            return None

        self.store[user.id] = user
        return user

    def update_last_login(self, user_id: str) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False

        now = datetime.now(timezone.utc)
        user.last_login = now
        user.updated_at = now
        return True

    def set_email_verification(self, user_id: str, secret: str, expires_at: datetime) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False

        user.email_verification_secret = secret
        user.email_verification_expires_at = expires_at
        user.updated_at = datetime.now(timezone.utc)
        return True

    def consume_email_verification(self, user_id: str, secret: str) -> bool:
        user = self.store.get(user_id)
        if not user or user.email_verification_secret != secret:
            return False

        user.email_verified = True
        user.email_verification_secret = None
        user.email_verification_expires_at = None
        user.updated_at = datetime.now(timezone.utc)
        return True

    def set_phone_verification(
        self,
        user_id: str,
        code: str,
        expires_at: datetime,
        phone_number: str | None = None,
    ) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False

        user.phone_verification_code = code
        user.phone_verification_expires_at = expires_at
        if phone_number and user.phone_number is None:
            user.phone_number = phone_number
        user.updated_at = datetime.now(timezone.utc)
        return True

    def consume_phone_verification(self, user_id: str, code: str) -> bool:
        user = self.store.get(user_id)
        if not user or user.phone_verification_code != code:
            return False

        user.phone_verified = True
        user.phone_verification_code = None
        user.phone_verification_expires_at = None
        user.updated_at = datetime.now(timezone.utc)
        return True

    def link_federated_identity(
        self,
        user_id: str,
        provider: str,
        federated_id: str,
        avatar: str | None = None,
    ) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        user.provider = provider
        user.federated_id = federated_id
        if avatar:
            user.avatar = avatar
        user.email_verified = True
        user.updated_at = datetime.now(timezone.utc)
        return user

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)

    def get_by_phone_number(self, phone_number: str) -> User | None:
        for user in self.store.values():
            if user.phone_number == phone_number:
                return user
        return None

    def get_by_email_verification_secret(self, secret: str) -> User | None:
        for user in self.store.values():
            if user.email_verification_secret == secret:
                return user
        return None
