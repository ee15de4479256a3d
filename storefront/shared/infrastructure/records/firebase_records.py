"""Firebase Realtime Database adapter for account records."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

import httpx

from storefront.shared.core.errors import TransportError
from storefront.shared.core.results import Err, Ok, Result
from storefront.shared.infrastructure.records.base import AccountRecordStore

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


class FirebaseRealtimeRecordStore(AccountRecordStore):
    """Reads and writes ``{database_url}/{users_path}/{user_id}`` over REST.

    Requests carry the signed-in user's ID token as the ``auth`` parameter
    when a token provider is supplied.
    """

    def __init__(
        self,
        database_url: str,
        users_path: str = "users",
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not database_url:
            raise ValueError("Realtime Database URL is required")
        self.database_url = database_url.rstrip("/")
        self.users_path = users_path.strip("/")
        self.token_provider = token_provider
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    def _url(self, *segments: str) -> str:
        path = "/".join([self.users_path, *(quote(s, safe="") for s in segments)])
        return f"{self.database_url}/{path}.json"

    def _params(self) -> Dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        return {"auth": token} if token else {}

    async def _request(self, method: str, url: str, payload: Any = None) -> Result[Any]:
        kwargs: Dict[str, Any] = {"params": self._params()}
        if method == "PUT":
            kwargs["json"] = payload
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"Record store {method} {url} failed: {e}")
            return Err(TransportError(f"Network error: {e}"))

        try:
            data = response.json()
        except ValueError:
            return Err(TransportError(
                f"Malformed response from record store (HTTP {response.status_code})",
                code=str(response.status_code),
            ))

        if response.is_error:
            detail = data.get("error") if isinstance(data, dict) else None
            logger.warning(f"Record store {method} returned HTTP {response.status_code}: {detail}")
            return Err(TransportError(
                f"Record store request failed: {detail or response.reason_phrase}",
                code=str(response.status_code),
            ))
        return Ok(data)

    async def get_field(self, user_id: str, field: str) -> Result[Any]:
        return await self._request("GET", self._url(user_id, field))

    async def set_field(self, user_id: str, field: str, value: Any) -> Result[None]:
        result = await self._request("PUT", self._url(user_id, field), value)
        if isinstance(result, Err):
            return result
        return Ok(None)

    async def get_record(self, user_id: str) -> Result[Dict[str, Any] | None]:
        result = await self._request("GET", self._url(user_id))
        if isinstance(result, Err):
            return result
        if result.value is not None and not isinstance(result.value, dict):
            return Err(TransportError(f"Record {user_id} is not an object"))
        return result

    async def put_record(self, user_id: str, data: Dict[str, Any]) -> Result[None]:
        result = await self._request("PUT", self._url(user_id), data)
        if isinstance(result, Err):
            return result
        return Ok(None)

    async def list_records(self) -> Result[Dict[str, Dict[str, Any]]]:
        result = await self._request("GET", self._url())
        if isinstance(result, Err):
            return result
        records = result.value or {}
        if not isinstance(records, dict):
            return Err(TransportError("Users node is not an object"))
        return Ok({key: value for key, value in records.items() if isinstance(value, dict)})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
