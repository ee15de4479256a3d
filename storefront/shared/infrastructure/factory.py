"""
Service factory for identity providers and account record stores.

Centralizes backend selection from configuration.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from dotenv import load_dotenv

from storefront.shared.core.configuration import BackendType, SystemConfig
from storefront.shared.infrastructure.identity.base import IdentityProvider
from storefront.shared.infrastructure.identity.firebase_identity import FirebaseIdentityProvider
from storefront.shared.infrastructure.identity.memory_identity import InMemoryIdentityProvider
from storefront.shared.infrastructure.records.base import AccountRecordStore
from storefront.shared.infrastructure.records.firebase_records import FirebaseRealtimeRecordStore
from storefront.shared.infrastructure.records.memory_records import InMemoryRecordStore

load_dotenv()

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Factory for creating the external collaborators of the account core."""

    @staticmethod
    def _normalize(backend: BackendType | str) -> BackendType:
        if isinstance(backend, BackendType):
            return backend
        try:
            return BackendType(backend.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unsupported backend: {backend}. "
                f"Supported: {[b.value for b in BackendType]}"
            ) from None

    @staticmethod
    def create_identity_provider(
        config: SystemConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> IdentityProvider:
        """Create the identity provider for the configured backend.

        Raises:
            ValueError: If the backend is unknown or its settings are incomplete
        """
        backend = ServiceFactory._normalize(config.auth.backend)
        if backend == BackendType.MEMORY:
            logger.info("ServiceFactory: Using in-memory identity provider")
            return InMemoryIdentityProvider()

        firebase = config.firebase
        if not firebase.api_key:
            raise ValueError("firebase.api_key is not configured (set FIREBASE_API_KEY)")
        logger.info(f"ServiceFactory: Using Firebase identity provider at {firebase.identity_base_url}")
        return FirebaseIdentityProvider(
            api_key=firebase.api_key,
            base_url=firebase.identity_base_url,
            timeout=firebase.timeout,
            client=client,
        )

    @staticmethod
    def create_record_store(
        config: SystemConfig,
        identity: Optional[IdentityProvider] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> AccountRecordStore:
        """Create the record store; Firebase requests are authorized with ``identity``'s token."""
        backend = ServiceFactory._normalize(config.auth.backend)
        if backend == BackendType.MEMORY:
            logger.info("ServiceFactory: Using in-memory record store")
            return InMemoryRecordStore()

        firebase = config.firebase
        if not firebase.database_url:
            raise ValueError("firebase.database_url is not configured (set FIREBASE_DATABASE_URL)")

        token_provider = None
        if isinstance(identity, FirebaseIdentityProvider):
            token_provider = identity.current_id_token

        logger.info(f"ServiceFactory: Using Realtime Database records at {firebase.database_url}")
        return FirebaseRealtimeRecordStore(
            database_url=firebase.database_url,
            users_path=firebase.users_path,
            token_provider=token_provider,
            timeout=firebase.timeout,
            client=client,
        )
