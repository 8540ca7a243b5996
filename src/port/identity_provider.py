"""Identity provider port: verification of external login assertions."""

from typing import Protocol

from domain.model.identity import FederatedProfile
from domain.model.result import Result


class IdentityProviderPort(Protocol):
    """Port for checking a provider-issued assertion (signature, audience, expiry).

    verify_assertion() returns Ok(FederatedProfile) for a genuine assertion,
    Err(UPSTREAM_VERIFICATION_FAILED) when the provider rejects it and
    Err(PROVIDER_UNAVAILABLE) when the provider cannot be reached.
    """

    async def verify_assertion(self, assertion: str) -> Result[FederatedProfile]: ...
