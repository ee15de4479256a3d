"""Change-password screen: re-authenticate, then replace the password."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.lifecycle import LifecycleScope
from storefront.shared.core.results import Err
from storefront.shared.infrastructure.identity.base import IdentityProvider
from storefront.shared.infrastructure.identity.messages import (
    EXPIRED_SESSION_CODES,
    INVALID_CREDENTIAL_CODES,
)

from . import validation
from .base import StateMachine
from .models import ChangePasswordState

logger = logging.getLogger(__name__)

NOT_SIGNED_IN_MESSAGE = "User not logged in"
INCORRECT_PASSWORD_MESSAGE = "Incorrect current password. Please try again."
SESSION_EXPIRED_MESSAGE = "Authentication session expired. Please sign in again."
PASSWORD_CHANGED_MESSAGE = "Password changed successfully"


class ChangePasswordStateMachine(StateMachine[ChangePasswordState]):
    screen = "change_password"

    def __init__(
        self,
        identity: IdentityProvider,
        scope: Optional[LifecycleScope] = None,
        event_bus: Optional[EventBus] = None,
        min_length: int = 8,
    ) -> None:
        self.identity = identity
        self.min_length = min_length
        super().__init__(ChangePasswordState(), scope, event_bus)

    def set_old_password(self, old_password: str) -> None:
        self._update(old_password=old_password)

    def set_new_password(self, new_password: str) -> None:
        self._update(new_password=new_password)

    def set_confirm_new_password(self, confirm_new_password: str) -> None:
        self._update(confirm_new_password=confirm_new_password)

    def change_password(self) -> Optional[asyncio.Task[ChangePasswordState]]:
        running = self._reject_if_busy("change_password")
        if running is not None:
            return running

        current = self.state
        error = validation.check_new_password(
            current.old_password,
            current.new_password,
            current.confirm_new_password,
            self.min_length,
        )
        if error is not None:
            self._update(error_message=error.message)
            return None

        session = self.identity.current_session()
        if session is None or not session.email:
            self._update(error_message=NOT_SIGNED_IN_MESSAGE)
            return None

        self._update(is_loading=True, error_message=None, success_message=None)
        return self._launch(
            self._run_change(session.user_id, current.old_password, current.new_password),
            "change",
        )

    async def _run_change(self, user_id: str, old_password: str, new_password: str) -> ChangePasswordState:
        try:
            reauth = await self.identity.reauthenticate(old_password)
            if isinstance(reauth, Err):
                return self._update(is_loading=False, error_message=self._describe_reauth_failure(reauth))

            updated = await self.identity.update_password(new_password)
            if isinstance(updated, Err):
                return self._update(is_loading=False, error_message=f"Error: {updated.message}")
        except Exception as e:
            logger.exception("Unexpected error while changing password")
            return self._update(is_loading=False, error_message=f"Error: {e}")

        logger.info(f"Password changed for {user_id}")
        await self._emit(events.TOPIC_PASSWORD_CHANGED, events.create_password_changed_event(user_id))
        return self._update(
            is_loading=False,
            success_message=PASSWORD_CHANGED_MESSAGE,
            old_password="",
            new_password="",
            confirm_new_password="",
        )

    @staticmethod
    def _describe_reauth_failure(result: Err) -> str:
        code = result.error.code
        if code in INVALID_CREDENTIAL_CODES:
            return INCORRECT_PASSWORD_MESSAGE
        if code in EXPIRED_SESSION_CODES:
            return SESSION_EXPIRED_MESSAGE
        return f"Error: {result.message}"

    def clear_messages(self) -> ChangePasswordState:
        return self._update(error_message=None, success_message=None)
