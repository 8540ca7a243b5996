"""Domain-level error kinds.

Services return these inside an ``Err`` to express business rule violations.
Only the API layer maps them to HTTP status codes.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminant for every failure a core operation can report."""
    VALIDATION = 'validation_error'
    DUPLICATE_ACCOUNT = 'duplicate_account'
    INVALID_CREDENTIALS = 'invalid_credentials'
    UNAUTHENTICATED = 'unauthenticated'
    FORBIDDEN = 'forbidden'
    RESOURCE_NOT_FOUND = 'resource_not_found'
    USER_NOT_FOUND = 'user_not_found'
    ALREADY_VERIFIED = 'already_verified'
    INVALID_OR_EXPIRED_SECRET = 'invalid_or_expired_secret'
    UPSTREAM_VERIFICATION_FAILED = 'upstream_verification_failed'
    PROVIDER_UNAVAILABLE = 'provider_unavailable'
    UNVERIFIED_PROVIDER_EMAIL = 'unverified_provider_email'
    TOKEN_MALFORMED = 'token_malformed'
    TOKEN_EXPIRED = 'token_expired'
    TOKEN_SIGNATURE_INVALID = 'token_signature_invalid'
    STORAGE_FAILURE = 'storage_failure'
