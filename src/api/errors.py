"""Mapping from domain error kinds to HTTP responses.

This is the only place that knows status codes. Routes call unwrap() on a
service Result and get the value back or an HTTPException raised with a
structured detail: {"message": ..., "error": <kind>}.
"""

from typing import NoReturn, TypeVar

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domain.model.errors import ErrorKind
from domain.model.result import Err, Result

T = TypeVar("T")

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_ACCOUNT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_VERIFIED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_OR_EXPIRED_SECRET: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UPSTREAM_VERIFICATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PROVIDER_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UNVERIFIED_PROVIDER_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.TOKEN_MALFORMED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.TOKEN_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.TOKEN_SIGNATURE_INVALID: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_error(err: Err) -> NoReturn:
    status_code = ERROR_STATUS.get(err.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    raise HTTPException(
        status_code=status_code,
        detail={"message": err.message, "error": err.kind.value},
        headers=headers,
    )


def unwrap(result: Result[T]) -> T:
    """Return the Ok value or raise the HTTPException for the Err."""
    if isinstance(result, Err):
        raise_for_error(result)
    return result.value


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 validation errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"message": message, "error": ErrorKind.VALIDATION.value}},
    )
