"""
Identity providers - credential verification and session issuance.

Supports Firebase Authentication (REST) and an in-memory backend.
"""

from storefront.shared.infrastructure.identity.base import AuthSession, IdentityProvider
from storefront.shared.infrastructure.identity.firebase_identity import FirebaseIdentityProvider
from storefront.shared.infrastructure.identity.memory_identity import InMemoryIdentityProvider

__all__ = [
    "AuthSession",
    "IdentityProvider",
    "FirebaseIdentityProvider",
    "InMemoryIdentityProvider",
]
