"""Standalone reset-password screen."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.lifecycle import LifecycleScope
from storefront.shared.core.results import Err
from storefront.shared.infrastructure.identity.base import IdentityProvider

from . import validation
from .base import GENERIC_ERROR_MESSAGE, StateMachine
from .models import ResetPasswordState
from .sign_in import RESET_FAILED_MESSAGE

logger = logging.getLogger(__name__)


class ResetPasswordStateMachine(StateMachine[ResetPasswordState]):
    """Sends a reset email for the address typed into the screen."""

    screen = "reset_password"

    def __init__(
        self,
        identity: IdentityProvider,
        scope: Optional[LifecycleScope] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.identity = identity
        super().__init__(ResetPasswordState(), scope, event_bus)

    def set_email(self, email: str) -> None:
        self._update(email=email)

    def reset_password(self) -> Optional[asyncio.Task[ResetPasswordState]]:
        running = self._reject_if_busy("reset_password")
        if running is not None:
            return running

        email = self.state.email
        error = validation.check_email_format(email)
        if error is not None:
            self._update(error_message=error.message)
            return None

        self._update(is_loading=True, error_message=None)
        return self._launch(self._run_reset(email), "reset")

    async def _run_reset(self, email: str) -> ResetPasswordState:
        try:
            result = await self.identity.send_password_reset(email)
        except Exception:
            logger.exception("Unexpected error while requesting password reset")
            return self._update(is_loading=False, error_message=GENERIC_ERROR_MESSAGE)

        if isinstance(result, Err):
            return self._update(is_loading=False, error_message=result.message or RESET_FAILED_MESSAGE)

        await self._emit(events.TOPIC_PASSWORD_RESET_SENT, events.create_password_reset_sent_event(email))
        return self._update(is_loading=False, is_success=True)
