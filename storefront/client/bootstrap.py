"""Storefront client - service wiring.

Builds the event bus and the external collaborators from configuration and
hands out per-screen state machines bound to the screen's lifecycle scope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from storefront.client.state import (
    ChangePasswordStateMachine,
    ResetPasswordStateMachine,
    SignInStateMachine,
    SignUpStateMachine,
)
from storefront.shared.core import events
from storefront.shared.core.configuration import SystemConfig, get_config
from storefront.shared.core.event_bus import EventBus, EventPayload
from storefront.shared.core.lifecycle import LifecycleScope
from storefront.shared.core.logging_setup import configure_logging
from storefront.shared.domain.accounts.moderation import AccountModerationService
from storefront.shared.infrastructure.factory import ServiceFactory
from storefront.shared.infrastructure.identity.base import IdentityProvider
from storefront.shared.infrastructure.records.base import AccountRecordStore

logger = logging.getLogger(__name__)


@dataclass
class ClientServices:
    """Long-lived collaborators shared by every screen."""

    config: SystemConfig
    event_bus: EventBus
    identity: IdentityProvider
    records: AccountRecordStore

    def sign_in_machine(self, scope: Optional[LifecycleScope] = None) -> SignInStateMachine:
        return SignInStateMachine(
            self.identity,
            self.records,
            scope=scope,
            event_bus=self.event_bus,
            min_password_length=self.config.auth.min_password_length,
        )

    def sign_up_machine(self, scope: Optional[LifecycleScope] = None) -> SignUpStateMachine:
        return SignUpStateMachine(
            self.identity,
            self.records,
            scope=scope,
            event_bus=self.event_bus,
            min_password_length=self.config.auth.min_password_length,
        )

    def reset_password_machine(self, scope: Optional[LifecycleScope] = None) -> ResetPasswordStateMachine:
        return ResetPasswordStateMachine(self.identity, scope=scope, event_bus=self.event_bus)

    def change_password_machine(self, scope: Optional[LifecycleScope] = None) -> ChangePasswordStateMachine:
        return ChangePasswordStateMachine(
            self.identity,
            scope=scope,
            event_bus=self.event_bus,
            min_length=self.config.auth.min_new_password_length,
        )

    def moderation(self) -> AccountModerationService:
        return AccountModerationService(self.records, self.event_bus)

    async def aclose(self) -> None:
        """Close HTTP clients and drop subscriptions."""
        await self.event_bus.wait_until_idle()
        await self.records.aclose()
        await self.identity.aclose()
        self.event_bus.clear()
        logger.info("Client services closed")


async def _log_auth_outcome(payload: EventPayload) -> None:
    if "reason" in payload:
        logger.warning(f"Access denied for {payload.get('user_id')}: {payload.get('reason')}")
    else:
        logger.info(f"Session started for {payload.get('user_id') or payload.get('email')}")


async def init_services(
    config: Optional[SystemConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    configure_logs: bool = True,
    log_base_dir: Optional[Path] = None,
) -> ClientServices:
    """Initialize the shared services with centralized configuration.

    Args:
        config: System configuration; loaded through ``get_config`` if omitted
        http_client: Shared client for the Firebase adapters (each adapter
            creates its own when omitted)
        configure_logs: Install the file and console handlers from
            ``config.logging``; pass False when the host app owns logging
        log_base_dir: Directory a relative ``logging.log_dir`` resolves against
    """
    config = config or get_config()
    if configure_logs:
        configure_logging(config.logging, base_dir=log_base_dir)
    event_bus = EventBus()

    identity = ServiceFactory.create_identity_provider(config, client=http_client)
    logger.info(f"Identity provider initialized: {type(identity).__name__}")

    records = ServiceFactory.create_record_store(config, identity, client=http_client)
    logger.info(f"Record store initialized: {type(records).__name__}")

    await event_bus.subscribe(events.TOPIC_SIGNED_IN, _log_auth_outcome)
    await event_bus.subscribe(events.TOPIC_ACCESS_DENIED, _log_auth_outcome)

    return ClientServices(config=config, event_bus=event_bus, identity=identity, records=records)
