"""Verification service: email and phone possession checks.

Both channels follow one lifecycle:

    send_*    → new secret + expiry stored on the user, overwriting any
                pending one, then handed to the notifier
    verify_*  → secret must be pending, equal and unexpired; on success the
                verified flag is set and the secret cleared

Secrets are single-use. Consumption is a conditional update on the stored
secret, so of two concurrent verifications only one succeeds.

Re-issuing on the same channel is last-write-wins: a client still holding
the earlier secret gets INVALID_OR_EXPIRED_SECRET even before its expiry.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from domain.model.errors import ErrorKind
from domain.model.identity import PhoneVerificationIssued
from domain.model.result import Err, Ok, Result
from domain.model.user import User
from port.notifier import NotifierPort
from port.user_repository import UserRepository
from services.auth_service import new_email_secret, normalize_email

logger = logging.getLogger(__name__)

PHONE_CODE_TTL = timedelta(minutes=10)
PHONE_CODE_MIN = 100000
PHONE_CODE_MAX = 999999

_INVALID_EMAIL_SECRET = Err(ErrorKind.INVALID_OR_EXPIRED_SECRET, "Invalid or expired verification token")
_INVALID_PHONE_CODE = Err(ErrorKind.INVALID_OR_EXPIRED_SECRET, "Invalid or expired verification code")
_USER_NOT_FOUND = Err(ErrorKind.USER_NOT_FOUND, "User not found")


def new_phone_code() -> str:
    """A uniformly random 6-digit code in 100000-999999."""
    return str(PHONE_CODE_MIN + secrets.randbelow(PHONE_CODE_MAX - PHONE_CODE_MIN + 1))


# ── email channel ────────────────────────────────────────────


def send_email_verification(
    repo: UserRepository,
    notifier: NotifierPort,
    email: str,
) -> Result[User]:
    """Issue a fresh email secret for the account registered under ``email``.

    Errors:
        USER_NOT_FOUND, ALREADY_VERIFIED, STORAGE_FAILURE
    """
    user = repo.get_by_email(normalize_email(email))
    if not user:
        return _USER_NOT_FOUND
    if user.email_verified:
        return Err(ErrorKind.ALREADY_VERIFIED, "Email already verified")

    secret, expires_at = new_email_secret()
    if not repo.set_email_verification(user.id, secret, expires_at):
        return Err(ErrorKind.STORAGE_FAILURE, "Failed to store verification token")

    notifier.send_email_verification(user.email, secret)
    logger.info("Email verification issued", extra={"userId": user.id})
    return Ok(user)


def verify_email(repo: UserRepository, secret: str, now: datetime | None = None) -> Result[User]:
    """Consume an email secret.

    Errors:
        INVALID_OR_EXPIRED_SECRET: unknown, replaced, already used or expired
    """
    now = now or datetime.now(timezone.utc)
    if not secret:
        return _INVALID_EMAIL_SECRET

    user = repo.get_by_email_verification_secret(secret)
    if not user or not user.email_secret_matches(secret, now):
        return _INVALID_EMAIL_SECRET

    if not repo.consume_email_verification(user.id, secret):
        return _INVALID_EMAIL_SECRET

    logger.info("Email verified", extra={"userId": user.id})
    return Ok(repo.get_by_id(user.id) or user)


# ── phone channel ────────────────────────────────────────────


def _resolve_phone_target(
    repo: UserRepository,
    phone_number: str | None,
    user_id: str | None,
) -> Result[User]:
    """Find the user by explicit id first, else by stored phone number."""
    if user_id:
        user = repo.get_by_id(user_id)
    elif phone_number:
        user = repo.get_by_phone_number(phone_number)
    else:
        return Err(ErrorKind.VALIDATION, "Phone number or user ID required")

    if not user:
        return _USER_NOT_FOUND
    return Ok(user)


def send_phone_verification(
    repo: UserRepository,
    notifier: NotifierPort,
    phone_number: str | None = None,
    user_id: str | None = None,
) -> Result[PhoneVerificationIssued]:
    """Issue a 6-digit code valid for 10 minutes.

    If the user has no phone number yet, ``phone_number`` is assigned to them.
    The code goes to whichever number is stored once the write lands, so a
    concurrent request that assigned a number first keeps it.

    Errors:
        VALIDATION: neither phone_number nor user_id given
        USER_NOT_FOUND, STORAGE_FAILURE
    """
    resolved = _resolve_phone_target(repo, phone_number, user_id)
    if isinstance(resolved, Err):
        return resolved
    user = resolved.value

    code = new_phone_code()
    expires_at = datetime.now(timezone.utc) + PHONE_CODE_TTL
    assign_number = phone_number if phone_number and not user.phone_number else None

    if not repo.set_phone_verification(user.id, code, expires_at, phone_number=assign_number):
        return Err(ErrorKind.STORAGE_FAILURE, "Failed to store verification code")

    updated = repo.get_by_id(user.id) or user
    if updated.phone_number:
        notifier.send_phone_code(updated.phone_number, code)
    else:
        logger.warning("Phone code issued for user without phone number", extra={"userId": user.id})

    logger.info("Phone verification issued", extra={"userId": user.id})
    return Ok(PhoneVerificationIssued(user=updated, code=code))


def verify_phone(
    repo: UserRepository,
    code: str,
    phone_number: str | None = None,
    user_id: str | None = None,
    now: datetime | None = None,
) -> Result[User]:
    """Consume a phone code.

    Errors:
        VALIDATION: neither phone_number nor user_id given
        USER_NOT_FOUND
        INVALID_OR_EXPIRED_SECRET: code mismatch, none pending or expired
    """
    now = now or datetime.now(timezone.utc)
    resolved = _resolve_phone_target(repo, phone_number, user_id)
    if isinstance(resolved, Err):
        return resolved
    user = resolved.value

    if not code or not user.phone_code_matches(code, now):
        return _INVALID_PHONE_CODE

    if not repo.consume_phone_verification(user.id, code):
        return _INVALID_PHONE_CODE

    logger.info("Phone verified", extra={"userId": user.id})
    return Ok(repo.get_by_id(user.id) or user)
