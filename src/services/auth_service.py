"""Auth service: registration and password authentication business logic.

Pure business logic with no HTTP dependencies.
Returns Ok/Err results that route handlers map to HTTP status codes.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt

from domain.model.errors import ErrorKind
from domain.model.identity import AuthSession
from domain.model.result import Err, Ok, Result
from domain.model.user import User
from port.notifier import NotifierPort
from port.user_repository import UserRepository
from services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2
EMAIL_SECRET_BYTES = 32
EMAIL_SECRET_TTL = timedelta(hours=24)

# Compared against when the email is unknown so both failure paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")

_INVALID_CREDENTIALS = Err(ErrorKind.INVALID_CREDENTIALS, "Invalid email or password")


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8")[:72], salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _validate_registration(name: str, password: str) -> Err | None:
    if len(name.strip()) < MIN_NAME_LENGTH:
        return Err(ErrorKind.VALIDATION, f"Name must be at least {MIN_NAME_LENGTH} characters")
    if len(password) < MIN_PASSWORD_LENGTH:
        return Err(ErrorKind.VALIDATION, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def new_email_secret() -> tuple[str, datetime]:
    """A 256-bit hex secret and its expiry."""
    return secrets.token_hex(EMAIL_SECRET_BYTES), datetime.now(timezone.utc) + EMAIL_SECRET_TTL


def register(
    repo: UserRepository,
    tokens: TokenIssuer,
    notifier: NotifierPort,
    name: str,
    email: str,
    password: str,
    phone_number: str | None = None,
) -> Result[AuthSession]:
    """Register a new credential account.

    The account starts with email_verified=False and a pending email secret.
    Login is not gated on verification.

    Errors:
        DUPLICATE_ACCOUNT: email already registered
        VALIDATION: name or password too short
        STORAGE_FAILURE: the store rejected the write
    """
    email = normalize_email(email)
    if repo.get_by_email(email):
        return Err(ErrorKind.DUPLICATE_ACCOUNT, "User already exists")

    invalid = _validate_registration(name, password)
    if invalid:
        return invalid

    secret, expires_at = new_email_secret()
    user = User.create(
        name=name.strip(),
        email=email,
        password_hash=_hash_password(password),
        phone_number=phone_number or None,
    )
    user.email_verification_secret = secret
    user.email_verification_expires_at = expires_at

    created = repo.create(user)
    if not created:
        # Lost a race against a concurrent registration, or the store is down
        if repo.get_by_email(email):
            return Err(ErrorKind.DUPLICATE_ACCOUNT, "User already exists")
        return Err(ErrorKind.STORAGE_FAILURE, "Failed to create user")

    notifier.send_email_verification(created.email, secret)
    logger.info("User registered", extra={"userId": created.id})
    return Ok(AuthSession(user=created, token=tokens.issue(created.id)))


def authenticate(
    repo: UserRepository,
    tokens: TokenIssuer,
    email: str,
    password: str,
) -> Result[AuthSession]:
    """Authenticate a user by email and password.

    Doesn't reveal whether the email exists: an unknown email, an account
    without a password and a wrong password all take one bcrypt check and
    return the same error.

    Errors:
        INVALID_CREDENTIALS: deliberately vague
    """
    user = repo.get_by_email(normalize_email(email))
    stored_hash = user.password_hash if user and user.has_password else _DUMMY_HASH

    password_ok = _verify_password(password, stored_hash)
    if not user or not user.has_password or not password_ok:
        return _INVALID_CREDENTIALS

    repo.update_last_login(user.id)
    logger.info("User logged in", extra={"userId": user.id})
    return Ok(AuthSession(user=user, token=tokens.issue(user.id)))
