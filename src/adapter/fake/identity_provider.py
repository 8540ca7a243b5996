"""In-memory implementation of IdentityProviderPort for testing."""

from domain.model.errors import ErrorKind
from domain.model.identity import FederatedProfile
from domain.model.result import Err, Ok, Result


class FakeIdentityProvider:
    """Accepts only assertions registered up front via ``register``."""

    def __init__(self, unavailable: bool = False):
        self.profiles: dict[str, FederatedProfile] = {}
        self.unavailable = unavailable
        self.last_assertion: str | None = None

    def register(
        self,
        assertion: str,
        email: str,
        subject_id: str = 'google-sub-1',
        email_verified: bool = True,
        name: str | None = 'Federated User',
        picture: str | None = None,
    ) -> FederatedProfile:
        profile = FederatedProfile(
            provider='google',
            subject_id=subject_id,
            email=email,
            email_verified_by_provider=email_verified,
            name=name,
            picture=picture,
        )
        self.profiles[assertion] = profile
        return profile

    async def verify_assertion(self, assertion: str) -> Result[FederatedProfile]:
        self.last_assertion = assertion
        if self.unavailable:
            return Err(ErrorKind.PROVIDER_UNAVAILABLE, "Identity provider unavailable")
        profile = self.profiles.get(assertion)
        if profile is None:
            return Err(ErrorKind.UPSTREAM_VERIFICATION_FAILED, "Invalid identity token")
        return Ok(profile)
