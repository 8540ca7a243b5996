"""JWT authentication and security dependencies."""

import os
import logging
from datetime import timedelta
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_user_repo
from api.errors import unwrap
from domain.model.user import User
from port.user_repository import UserRepository
from services import authorization_service
from services.token_service import DEFAULT_ALGORITHM, TokenIssuer

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = DEFAULT_ALGORITHM
JWT_EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", "30"))

security = HTTPBearer(auto_error=False)


def get_token_issuer() -> TokenIssuer:
    """TokenIssuer configured from the environment."""
    return TokenIssuer(
        secret_key=JWT_SECRET_KEY,
        algorithm=JWT_ALGORITHM,
        lifetime=timedelta(days=JWT_EXPIRATION_DAYS),
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_repo: UserRepository = Depends(get_user_repo),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> User:
    """Get current authenticated user (required). Raises 401 if not authenticated."""
    token = credentials.credentials if credentials else None
    return unwrap(authorization_service.authenticate(user_repo, tokens, token))
