"""
Shared Infrastructure Module
=============================

Technical adapters for the external identity provider and record store.
"""

# Identity
from storefront.shared.infrastructure.identity import (
    AuthSession,
    IdentityProvider,
    FirebaseIdentityProvider,
    InMemoryIdentityProvider,
)

# Records
from storefront.shared.infrastructure.records import (
    AccountRecordStore,
    FirebaseRealtimeRecordStore,
    InMemoryRecordStore,
)

# Factory
from storefront.shared.infrastructure.factory import ServiceFactory

__all__ = [
    # Identity
    "AuthSession",
    "IdentityProvider",
    "FirebaseIdentityProvider",
    "InMemoryIdentityProvider",
    # Records
    "AccountRecordStore",
    "FirebaseRealtimeRecordStore",
    "InMemoryRecordStore",
    # Factory
    "ServiceFactory",
]
