"""Sign-up state machine: create the identity, then its account record."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.lifecycle import LifecycleScope
from storefront.shared.core.results import Err
from storefront.shared.domain.accounts.models import AccountRecord
from storefront.shared.infrastructure.identity.base import IdentityProvider
from storefront.shared.infrastructure.records.base import AccountRecordStore

from . import validation
from .base import GENERIC_ERROR_MESSAGE, StateMachine
from .models import SignUpState

logger = logging.getLogger(__name__)


class SignUpStateMachine(StateMachine[SignUpState]):
    """Registers an account and writes its profile record.

    The profile write is best effort: the identity already exists once
    ``create_account`` succeeds, so a failed write is logged and sign-up
    still succeeds.
    """

    screen = "sign_up"

    def __init__(
        self,
        identity: IdentityProvider,
        records: AccountRecordStore,
        scope: Optional[LifecycleScope] = None,
        event_bus: Optional[EventBus] = None,
        min_password_length: int = 6,
    ) -> None:
        self.identity = identity
        self.records = records
        self.min_password_length = min_password_length
        super().__init__(SignUpState(), scope, event_bus)

    def set_email(self, email: str) -> None:
        self._update(email=email)

    def set_name(self, name: str) -> None:
        self._update(name=name)

    def set_password(self, password: str) -> None:
        self._update(password=password)

    def set_confirm_password(self, confirm_password: str) -> None:
        self._update(confirm_password=confirm_password)

    def sign_up(
        self,
        email: str,
        name: str,
        password: str,
        confirm_password: str,
    ) -> Optional[asyncio.Task[SignUpState]]:
        running = self._reject_if_busy("sign_up")
        if running is not None:
            return running

        error = (
            validation.require_email(email)
            or validation.require_name(name)
            or validation.check_password_length(password, self.min_password_length)
            or validation.check_passwords_match(password, confirm_password)
        )
        if error is not None:
            self._update(error_message=error.message)
            return None

        self._update(is_loading=True, is_success=False, error_message="")
        return self._launch(self._run_sign_up(email, name, password), "sign-up")

    async def _run_sign_up(self, email: str, name: str, password: str) -> SignUpState:
        try:
            created = await self.identity.create_account(email, password)
            if isinstance(created, Err):
                logger.info(f"Account creation failed: {created.error.code}")
                return self._update(is_loading=False, error_message=created.message)

            user_id = created.value
            if user_id is not None:
                await self._save_profile(AccountRecord(id=user_id, email=email, name=name))
                await self._emit(
                    events.TOPIC_ACCOUNT_CREATED,
                    events.create_account_created_event(user_id, email, name),
                )

            return self._update(is_loading=False, is_success=True)
        except Exception:
            logger.exception("Unexpected error during sign-up")
            return self._update(is_loading=False, error_message=GENERIC_ERROR_MESSAGE)

    async def _save_profile(self, record: AccountRecord) -> bool:
        result = await self.records.put_record(record.id, record.to_store())
        if isinstance(result, Err):
            logger.error(f"Could not save profile for {record.id}: {result.message}")
            return False
        return True

    def reset_sign_up_state(self) -> SignUpState:
        """Clear ``is_success`` after the UI has navigated away."""
        return self._update(is_success=False)
