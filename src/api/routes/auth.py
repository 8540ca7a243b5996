"""Authentication routes.

Credential, federated and verification endpoints. Each handler calls one
service operation and unwraps its Result; status codes live in api.errors.
"""

import logging
import os

from fastapi import APIRouter, Depends, status

from api.dependencies import get_identity_provider, get_notifier, get_user_repo
from api.errors import unwrap
from api.models import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    SendPhoneVerificationRequest,
    SendPhoneVerificationResponse,
    SendVerificationRequest,
    UserEnvelope,
    UserResponse,
    VerifyEmailRequest,
    VerifyPhoneRequest,
    VerifyPhoneResponse,
)
from api.security import get_current_user_required, get_token_issuer
from domain.model.user import User
from port.identity_provider import IdentityProviderPort
from port.notifier import NotifierPort
from port.user_repository import UserRepository
from services import auth_service, federation_service, verification_service
from services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Returning the SMS code in the response body is a demo shortcut, never enable in production
EXPOSE_PHONE_CODE = os.getenv("EXPOSE_PHONE_CODE", "false").lower() in ("1", "true", "yes")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenIssuer = Depends(get_token_issuer),
    notifier: NotifierPort = Depends(get_notifier),
):
    """Register a new user and sign them in.

    The account is usable immediately; email verification is requested but
    not required for login.
    """
    session = unwrap(auth_service.register(
        repo,
        tokens,
        notifier,
        name=request.name,
        email=request.email,
        password=request.password,
        phone_number=request.phone_number,
    ))
    return RegisterResponse(
        user=UserResponse.from_domain(session.user),
        token=session.token,
        message="Registration successful! Please verify your email.",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """Login user and return JWT token."""
    session = unwrap(auth_service.authenticate(repo, tokens, request.email, request.password))
    return AuthResponse(user=UserResponse.from_domain(session.user), token=session.token)


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(request: VerifyEmailRequest, repo: UserRepository = Depends(get_user_repo)):
    """Consume the emailed verification token."""
    unwrap(verification_service.verify_email(repo, request.token))
    return MessageResponse(message="Email verified successfully!")


@router.post("/send-verification", response_model=MessageResponse)
async def send_verification(
    request: SendVerificationRequest,
    repo: UserRepository = Depends(get_user_repo),
    notifier: NotifierPort = Depends(get_notifier),
):
    """Issue a fresh email verification token, replacing any pending one."""
    unwrap(verification_service.send_email_verification(repo, notifier, request.email))
    return MessageResponse(message="Verification email sent!")


@router.post("/send-phone-verification", response_model=SendPhoneVerificationResponse)
async def send_phone_verification(
    request: SendPhoneVerificationRequest,
    repo: UserRepository = Depends(get_user_repo),
    notifier: NotifierPort = Depends(get_notifier),
):
    """Issue a 6-digit SMS code for the user identified by id or phone number."""
    issued = unwrap(verification_service.send_phone_verification(
        repo,
        notifier,
        phone_number=request.phone_number,
        user_id=request.user_id,
    ))
    return SendPhoneVerificationResponse(
        message="Verification code sent!",
        code=issued.code if EXPOSE_PHONE_CODE else None,
    )


@router.post("/verify-phone", response_model=VerifyPhoneResponse)
async def verify_phone(request: VerifyPhoneRequest, repo: UserRepository = Depends(get_user_repo)):
    """Consume an SMS code."""
    user = unwrap(verification_service.verify_phone(
        repo,
        request.code,
        phone_number=request.phone_number,
        user_id=request.user_id,
    ))
    return VerifyPhoneResponse(
        message="Phone number verified successfully!",
        user=UserResponse.from_domain(user),
    )


@router.post("/google-login", response_model=AuthResponse)
async def google_login(
    request: GoogleLoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenIssuer = Depends(get_token_issuer),
    provider: IdentityProviderPort = Depends(get_identity_provider),
):
    """Sign in with a Google ID token, creating or linking the local account."""
    session = unwrap(await federation_service.login(repo, tokens, provider, request.token_id))
    return AuthResponse(user=UserResponse.from_domain(session.user), token=session.token)


@router.get("/me", response_model=UserEnvelope)
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return UserEnvelope(user=UserResponse.from_domain(current_user))
