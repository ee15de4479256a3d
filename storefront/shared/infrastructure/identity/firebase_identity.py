"""Firebase Authentication adapter over the Identity Toolkit REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from storefront.shared.core.errors import AuthenticationError, TransportError
from storefront.shared.core.results import Err, Ok, Result
from storefront.shared.infrastructure.identity.base import AuthSession, IdentityProvider
from storefront.shared.infrastructure.identity.messages import describe, normalize_code

logger = logging.getLogger(__name__)


class FirebaseIdentityProvider(IdentityProvider):
    """Email/password identity backed by Firebase Authentication.

    The REST API has no server-side sign-out, so ``sign_out`` drops the
    locally held tokens. Every request failure is returned as an ``Err``:
    provider rejections as ``AuthenticationError`` carrying the provider's
    error code, and network or decoding problems as ``TransportError``.
    """

    DEFAULT_BASE_URL = "https://identitytoolkit.googleapis.com/v1"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ValueError("Firebase API key is required")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        self._session: Optional[AuthSession] = None

    async def _post(self, endpoint: str, body: Dict[str, Any]) -> Result[Dict[str, Any]]:
        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            response = await self._client.post(url, params={"key": self.api_key}, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"Identity request '{endpoint}' failed: {e}")
            return Err(TransportError(f"Network error: {e}"))

        try:
            data = response.json()
        except ValueError:
            return Err(TransportError(
                f"Malformed response from identity provider (HTTP {response.status_code})"
            ))
        if not isinstance(data, dict):
            return Err(TransportError("Unexpected response shape from identity provider"))

        if response.is_error or "error" in data:
            error = data.get("error") or {}
            code = normalize_code(error.get("message") if isinstance(error, dict) else str(error))
            logger.info(f"Identity request '{endpoint}' rejected: {code} (HTTP {response.status_code})")
            return Err(AuthenticationError(describe(code), code=code))

        return Ok(data)

    def _remember_session(self, data: Dict[str, Any], email: str) -> Optional[str]:
        user_id = data.get("localId")
        if user_id:
            self._session = AuthSession(
                user_id=user_id,
                email=data.get("email") or email,
                id_token=data.get("idToken"),
                refresh_token=data.get("refreshToken"),
            )
        return user_id

    async def verify_credentials(self, email: str, password: str) -> Result[Optional[str]]:
        result = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if isinstance(result, Err):
            return result
        return Ok(self._remember_session(result.value, email))

    def sign_out(self) -> None:
        if self._session is not None:
            logger.info(f"Signing out {self._session.user_id}")
        self._session = None

    async def send_password_reset(self, email: str) -> Result[None]:
        result = await self._post("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
        if isinstance(result, Err):
            return result
        return Ok(None)

    def current_session(self) -> Optional[AuthSession]:
        return self._session

    def current_id_token(self) -> Optional[str]:
        """Token used to authorize record store requests."""
        return self._session.id_token if self._session else None

    async def create_account(self, email: str, password: str) -> Result[Optional[str]]:
        result = await self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if isinstance(result, Err):
            return result
        return Ok(self._remember_session(result.value, email))

    async def reauthenticate(self, password: str) -> Result[None]:
        if self._session is None:
            return Err(AuthenticationError(describe("INVALID_ID_TOKEN"), code="INVALID_ID_TOKEN"))
        result = await self.verify_credentials(self._session.email, password)
        if isinstance(result, Err):
            return result
        return Ok(None)

    async def update_password(self, new_password: str) -> Result[None]:
        if self._session is None or not self._session.id_token:
            return Err(AuthenticationError(describe("INVALID_ID_TOKEN"), code="INVALID_ID_TOKEN"))
        result = await self._post(
            "update",
            {"idToken": self._session.id_token, "password": new_password, "returnSecureToken": True},
        )
        if isinstance(result, Err):
            return result
        # Changing the password revokes the old tokens
        self._remember_session(result.value, self._session.email)
        return Ok(None)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
