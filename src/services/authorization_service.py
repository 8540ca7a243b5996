"""Authorization guard: session check plus resource ownership.

Every protected operation runs authenticate() first. Resource operations then
run authorize(), which checks existence before ownership: a missing resource
is RESOURCE_NOT_FOUND for every caller, an existing one owned by someone else
is FORBIDDEN. The differing errors do tell a non-owner that an id exists.
"""

import logging

from domain.model.errors import ErrorKind
from domain.model.result import Err, Ok, Result
from domain.model.todo import Todo
from domain.model.user import User
from port.user_repository import UserRepository
from services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

_UNAUTHENTICATED = "Not authenticated"


def authenticate(
    repo: UserRepository,
    tokens: TokenIssuer,
    token: str | None,
) -> Result[User]:
    """Resolve the bearer of ``token`` to a stored user.

    Any token failure (missing, malformed, expired, bad signature) and a
    token for a user that no longer exists all collapse to UNAUTHENTICATED.
    """
    if not token:
        return Err(ErrorKind.UNAUTHENTICATED, _UNAUTHENTICATED)

    validated = tokens.validate(token)
    if isinstance(validated, Err):
        logger.debug("Session token rejected", extra={"reason": validated.kind.value})
        return Err(ErrorKind.UNAUTHENTICATED, "Invalid authentication credentials")

    user = repo.get_by_id(validated.value)
    if not user:
        return Err(ErrorKind.UNAUTHENTICATED, "User not found")
    return Ok(user)


def authorize(identity: User, resource: Todo | None) -> Result[Todo]:
    """Allow ``identity`` to act on ``resource`` only if it exists and they own it."""
    if resource is None:
        return Err(ErrorKind.RESOURCE_NOT_FOUND, "Todo not found")
    if not resource.is_owned_by(identity.id):
        logger.info("Ownership check failed", extra={"userId": identity.id, "todoId": resource.id})
        return Err(ErrorKind.FORBIDDEN, "Not authorized to access this todo")
    return Ok(resource)
