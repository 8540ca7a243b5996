"""Federation service: login through an external identity provider.

Find-or-create/merge policy: the provider's verified email is the join key.

- No local account with that email → a new account is created with
  email_verified=True, no password, and the provider subject linked.
- An account exists → the provider subject is linked to it and
  email_verified is forced to True, even for a password account that never
  verified its email. The provider's verification is trusted in place of
  ours. This merge is logged at WARNING so it stays visible.
"""

import logging

from domain.model.errors import ErrorKind
from domain.model.identity import AuthSession, FederatedProfile
from domain.model.result import Err, Ok, Result
from domain.model.user import User
from port.identity_provider import IdentityProviderPort
from port.user_repository import UserRepository
from services.auth_service import normalize_email
from services.token_service import TokenIssuer

logger = logging.getLogger(__name__)


def _display_name(profile: FederatedProfile) -> str:
    if profile.name and profile.name.strip():
        return profile.name.strip()
    return profile.email.split("@", 1)[0]


def _link_existing(repo: UserRepository, user: User, profile: FederatedProfile) -> User | None:
    if user.has_password and not user.email_verified:
        logger.warning(
            "Federated login force-verified a password account",
            extra={"userId": user.id, "provider": profile.provider},
        )
    elif user.federated_id and user.federated_id != profile.subject_id:
        logger.warning(
            "Federated subject replaced on existing account",
            extra={"userId": user.id, "provider": profile.provider},
        )
    return repo.link_federated_identity(
        user.id,
        provider=profile.provider,
        federated_id=profile.subject_id,
        avatar=profile.picture,
    )


def _create_federated(repo: UserRepository, email: str, profile: FederatedProfile) -> User | None:
    user = User.create(
        name=_display_name(profile),
        email=email,
        provider=profile.provider,
        federated_id=profile.subject_id,
        avatar=profile.picture,
        email_verified=True,
    )
    return repo.create(user)


async def login(
    repo: UserRepository,
    tokens: TokenIssuer,
    provider: IdentityProviderPort,
    assertion: str,
) -> Result[AuthSession]:
    """Verify a provider assertion and sign the matching local account in.

    Errors:
        UPSTREAM_VERIFICATION_FAILED: provider rejected the assertion
        PROVIDER_UNAVAILABLE: provider could not be reached
        UNVERIFIED_PROVIDER_EMAIL: provider has not verified the email
        STORAGE_FAILURE
    """
    verified = await provider.verify_assertion(assertion)
    if isinstance(verified, Err):
        return verified
    profile = verified.value

    if not profile.email_verified_by_provider:
        return Err(ErrorKind.UNVERIFIED_PROVIDER_EMAIL, f"{profile.provider.capitalize()} email not verified")

    email = normalize_email(profile.email)
    existing = repo.get_by_email(email)
    if existing:
        user = _link_existing(repo, existing, profile)
    else:
        user = _create_federated(repo, email, profile)
        if user is None:
            # A concurrent login or registration created the account first
            existing = repo.get_by_email(email)
            user = _link_existing(repo, existing, profile) if existing else None
        else:
            logger.info("Federated account created", extra={"userId": user.id, "provider": profile.provider})

    if user is None:
        return Err(ErrorKind.STORAGE_FAILURE, "Failed to sign in with provider")

    repo.update_last_login(user.id)
    return Ok(AuthSession(user=user, token=tokens.issue(user.id)))
