"""In-process identity provider for local development and tests."""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional

from storefront.shared.core.errors import AuthenticationError
from storefront.shared.core.results import Err, Ok, Result
from storefront.shared.infrastructure.identity.base import AuthSession, IdentityProvider
from storefront.shared.infrastructure.identity.messages import describe

logger = logging.getLogger(__name__)


@dataclass
class _Account:
    user_id: str
    email: str
    password: str


class InMemoryIdentityProvider(IdentityProvider):
    """Keeps accounts in a dict and a single local session.

    ``call_counts`` records how often each operation was invoked.
    """

    def __init__(self) -> None:
        self._accounts: Dict[str, _Account] = {}
        self._session: Optional[AuthSession] = None
        self.sent_resets: list[str] = []
        self.call_counts: Counter[str] = Counter()

    def add_account(self, email: str, password: str, user_id: Optional[str] = None) -> str:
        """Seed an account and return its user id."""
        user_id = user_id or uuid.uuid4().hex[:28]
        self._accounts[email.lower()] = _Account(user_id, email, password)
        return user_id

    def restore_session(self, user_id: str, email: str = "") -> None:
        """Pretend a session survived from a previous run."""
        self._session = AuthSession(user_id=user_id, email=email, id_token=f"token-{user_id}")

    def _error(self, code: str) -> Err:
        return Err(AuthenticationError(describe(code), code=code))

    async def verify_credentials(self, email: str, password: str) -> Result[str]:
        self.call_counts["verify_credentials"] += 1
        account = self._accounts.get(email.lower())
        if account is None:
            return self._error("EMAIL_NOT_FOUND")
        if account.password != password:
            return self._error("INVALID_PASSWORD")

        self._session = AuthSession(user_id=account.user_id, email=account.email, id_token=f"token-{account.user_id}")
        logger.debug(f"Signed in {account.user_id}")
        return Ok(account.user_id)

    def sign_out(self) -> None:
        self.call_counts["sign_out"] += 1
        self._session = None

    async def send_password_reset(self, email: str) -> Result[None]:
        self.call_counts["send_password_reset"] += 1
        if email.lower() not in self._accounts:
            return self._error("EMAIL_NOT_FOUND")
        self.sent_resets.append(email)
        return Ok(None)

    def current_session(self) -> Optional[AuthSession]:
        return self._session

    async def create_account(self, email: str, password: str) -> Result[str]:
        self.call_counts["create_account"] += 1
        if email.lower() in self._accounts:
            return self._error("EMAIL_EXISTS")
        if len(password) < 6:
            return self._error("WEAK_PASSWORD")

        user_id = self.add_account(email, password)
        self._session = AuthSession(user_id=user_id, email=email, id_token=f"token-{user_id}")
        return Ok(user_id)

    async def reauthenticate(self, password: str) -> Result[None]:
        self.call_counts["reauthenticate"] += 1
        if self._session is None:
            return self._error("INVALID_ID_TOKEN")
        account = self._accounts.get(self._session.email.lower())
        if account is None or account.password != password:
            return self._error("INVALID_PASSWORD")
        return Ok(None)

    async def update_password(self, new_password: str) -> Result[None]:
        self.call_counts["update_password"] += 1
        if self._session is None:
            return self._error("INVALID_ID_TOKEN")
        account = self._accounts.get(self._session.email.lower())
        if account is None:
            return self._error("EMAIL_NOT_FOUND")
        account.password = new_password
        return Ok(None)
