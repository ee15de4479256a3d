"""Identity provider contract.

Every asynchronous operation returns a ``Result``; adapters convert their
transport exceptions into ``Err`` values at this boundary.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from storefront.shared.core.results import Result


@dataclass(frozen=True)
class AuthSession:
    """A session issued by the identity provider."""

    user_id: str
    email: str = ""
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None


class IdentityProvider(ABC):
    """Credential verification, session issuance and password reset."""

    @abstractmethod
    async def verify_credentials(self, email: str, password: str) -> Result[str]:
        """Sign in and return the authenticated user id."""

    @abstractmethod
    def sign_out(self) -> None:
        """Revoke the locally held session."""

    @abstractmethod
    async def send_password_reset(self, email: str) -> Result[None]:
        """Ask the provider to email a password reset link."""

    @abstractmethod
    def current_session(self) -> Optional[AuthSession]:
        """Return the live session, if any."""

    @abstractmethod
    async def create_account(self, email: str, password: str) -> Result[str]:
        """Register a new account, sign it in, and return its user id."""

    @abstractmethod
    async def reauthenticate(self, password: str) -> Result[None]:
        """Re-verify the current session's password."""

    @abstractmethod
    async def update_password(self, new_password: str) -> Result[None]:
        """Replace the password of the current session's account."""

    async def aclose(self) -> None:
        """Release any held resources."""
