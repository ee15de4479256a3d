"""Sign-in state machine.

Flow of one attempt::

    IDLE -> VALIDATING -> AUTHENTICATING -> CHECKING_AUTHORIZATION -> SUCCEEDED
                 |              |                     |
                 +--------------+---------------------+---------------> FAILED

Validation runs synchronously in ``sign_in`` and never touches the network.
Once credentials are verified the account's ``banned`` flag is read; a banned
account has its fresh session revoked before the failure is reported.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from storefront.shared.core import events
from storefront.shared.core.errors import AuthorizationError
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.lifecycle import LifecycleScope
from storefront.shared.core.results import Err
from storefront.shared.domain.accounts.models import BANNED_FIELD
from storefront.shared.infrastructure.identity.base import IdentityProvider
from storefront.shared.infrastructure.records.base import AccountRecordStore

from . import validation
from .base import GENERIC_ERROR_MESSAGE, StateMachine
from .models import SessionState, SignInPhase

logger = logging.getLogger(__name__)

BANNED_MESSAGE = "Your account has been banned. Please contact support."
ACCOUNT_CHECK_FAILED_MESSAGE = "Unable to verify account status. Please try again."
AUTHENTICATION_FAILED_MESSAGE = "Authentication failed"
RESET_EMAIL_REQUIRED_MESSAGE = "Please enter your email address"
RESET_FAILED_MESSAGE = "Failed to send reset email"


class SignInStateMachine(StateMachine[SessionState]):
    """Orchestrates sign-in, the ban check, and password reset for one screen.

    Args:
        identity: Identity provider used to verify credentials and sign out
        records: Account record store holding the ``banned`` flag
        scope: Lifecycle scope owning launched tasks (one is created if omitted)
        event_bus: Optional bus receiving state snapshots and outcome events
        min_password_length: Minimum accepted password length
    """

    screen = "sign_in"

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
        initial = SessionState(has_user=identity.current_session() is not None)
        super().__init__(initial, scope, event_bus)

    # --- Field mutators ---

    def set_email(self, email: str) -> None:
        self._update(email=email)

    def set_password(self, password: str) -> None:
        self._update(password=password)

    # --- Sign-in ---

    def sign_in(self, email: str, password: str) -> Optional[asyncio.Task[SessionState]]:
        """Start a sign-in attempt.

        Returns:
            The task running the attempt, the already running task if an
            attempt is in flight, or None if validation failed
        """
        running = self._reject_if_busy("sign_in")
        if running is not None:
            return running

        self._update(phase=SignInPhase.VALIDATING)
        error = (
            validation.require_email(email)
            or validation.check_password_length(password, self.min_password_length)
        )
        if error is not None:
            logger.debug(f"Sign-in rejected locally: {error.code}")
            self._fail(error.message)
            return None

        self._update(
            phase=SignInPhase.AUTHENTICATING,
            is_loading=True,
            is_success=False,
            error_message="",
        )
        return self._launch(self._run_sign_in(email, password), "sign-in")

    async def _run_sign_in(self, email: str, password: str) -> SessionState:
        # True while a session exists that has not passed the ban check
        unvetted = False
        try:
            verified = await self.identity.verify_credentials(email, password)
            if isinstance(verified, Err):
                logger.info(f"Credential verification failed: {verified.error.code}")
                return self._fail(verified.message or AUTHENTICATION_FAILED_MESSAGE)

            user_id = verified.value
            if user_id is None:
                logger.warning("Provider returned no user id; skipping authorization check")
                return await self._succeed(None, email)

            unvetted = True
            self._update(phase=SignInPhase.CHECKING_AUTHORIZATION)
            lookup = await self.records.get_field(user_id, BANNED_FIELD)
            if isinstance(lookup, Err):
                logger.error(f"Ban lookup failed for {user_id}: {lookup.message}")
                unvetted = False
                return await self._deny(
                    user_id, AuthorizationError(ACCOUNT_CHECK_FAILED_MESSAGE, code="ACCOUNT_CHECK_FAILED")
                )

            banned = lookup.value
            if banned is None:
                banned = False
            if not isinstance(banned, bool):
                logger.error(f"Unexpected banned value for {user_id}: {banned!r}")
                unvetted = False
                return await self._deny(
                    user_id, AuthorizationError(ACCOUNT_CHECK_FAILED_MESSAGE, code="ACCOUNT_CHECK_FAILED")
                )

            unvetted = False
            if banned:
                logger.warning(f"Banned account {user_id} attempted to sign in")
                return await self._deny(user_id, AuthorizationError(BANNED_MESSAGE, code="BANNED"))

            return await self._succeed(user_id, email)
        except asyncio.CancelledError:
            if unvetted:
                logger.info("Sign-in cancelled before the account check finished; revoking session")
                self._revoke_session()
            raise
        except Exception:
            logger.exception("Unexpected error during sign-in")
            if unvetted:
                self._revoke_session()
            return self._fail(GENERIC_ERROR_MESSAGE)

    async def _deny(self, user_id: str, error: AuthorizationError) -> SessionState:
        """Revoke the fresh session, then report ``error``."""
        self.identity.sign_out()
        self._fail(error.message)
        await self._emit(
            events.TOPIC_ACCESS_DENIED,
            events.create_access_denied_event(user_id, error.code),
        )
        return self.state

    async def _succeed(self, user_id: Optional[str], email: str) -> SessionState:
        self._update(
            phase=SignInPhase.SUCCEEDED,
            is_loading=False,
            is_success=True,
            error_message="",
        )
        logger.info(f"Signed in {user_id or email}")
        await self._emit(events.TOPIC_SIGNED_IN, events.create_signed_in_event(user_id, email))
        return self.state

    def _fail(self, message: str) -> SessionState:
        return self._update(
            phase=SignInPhase.FAILED,
            is_loading=False,
            is_success=False,
            error_message=message,
        )

    def _revoke_session(self) -> None:
        try:
            self.identity.sign_out()
        except Exception:
            logger.exception("Sign-out failed while aborting sign-in")

    # --- Password reset ---

    def reset_password(
        self,
        email: str,
        on_success: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> Optional[asyncio.Task]:
        """Request a reset email; outcome is reported through the callbacks.

        While another operation is in flight the request is not sent and the
        running task is returned; neither callback fires for this call.
        A sign-in success that has not been cleared with
        ``reset_session_flags`` also refuses the request.

        Returns:
            The task sending the request, the already running task, or None
            if ``email`` was empty or a sign-in success is pending
        """
        if not email:
            on_error(RESET_EMAIL_REQUIRED_MESSAGE)
            return None

        running = self._reject_if_busy("reset_password")
        if running is not None:
            return running
        if self.state.is_success:
            logger.info("Ignoring reset_password: sign-in success not yet consumed")
            return None

        self._update(is_loading=True)
        return self._launch(self._run_reset_password(email, on_success, on_error), "reset-password")

    async def _run_reset_password(
        self,
        email: str,
        on_success: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        try:
            result = await self.identity.send_password_reset(email)
        except Exception:
            logger.exception("Unexpected error while requesting password reset")
            self._update(is_loading=False)
            if self.scope.is_active:
                on_error(GENERIC_ERROR_MESSAGE)
            return

        self._update(is_loading=False)
        if not self.scope.is_active:
            return

        if isinstance(result, Err):
            logger.info(f"Password reset request failed: {result.error.code}")
            on_error(result.message or RESET_FAILED_MESSAGE)
            return

        logger.info("Password reset email requested")
        await self._emit(events.TOPIC_PASSWORD_RESET_SENT, events.create_password_reset_sent_event(email))
        on_success()

    # --- Session flags ---

    def reset_session_flags(self) -> SessionState:
        """Clear ``is_success`` and ``has_user`` once the UI has navigated away."""
        changes = {"is_success": False, "has_user": False}
        if self.state.phase == SignInPhase.SUCCEEDED:
            changes["phase"] = SignInPhase.IDLE
        return self._update(**changes)
