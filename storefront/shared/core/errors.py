"""Error taxonomy for account and session operations.

These are carried inside ``Err`` results rather than raised across the state
machine boundary.
"""

from __future__ import annotations

from typing import Optional


class StorefrontError(Exception):
    """Base class for all storefront client errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, code={self.code!r})"


class ValidationError(StorefrontError):
    """Local input precondition failed; nothing was sent to a provider."""


class AuthenticationError(StorefrontError):
    """Credentials rejected or the identity provider refused the request."""


class AuthorizationError(StorefrontError):
    """Credentials are valid but the account may not hold a session."""


class TransportError(StorefrontError):
    """Network failure, unexpected status, or malformed provider response."""
