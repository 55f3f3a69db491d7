"""Identity provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class IdentityUser:
    """An account held by the external identity provider."""

    uid: str
    email: str
    verification_link: Optional[str] = None


class IIdentityProvider(Protocol):
    """Protocol for identity providers.

    Implementations raise ``UpstreamAuthError`` with the provider's message
    when the provider rejects an operation.
    """

    async def create_user(self, email: str, password: str) -> IdentityUser:
        """
        Create an account and a verification link for it.

        Args:
            email: Account email
            password: Initial password

        Returns:
            The created user, with ``verification_link`` when available
        """
        ...

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        """
        Verify credentials and return the matching account.

        Args:
            email: Account email
            password: Account password

        Returns:
            The signed-in user
        """
        ...
