import asyncio
from typing import Any, Optional

import pytest

from storefront.shared.core.errors import TransportError
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.lifecycle import LifecycleScope
from storefront.shared.core.results import Err, Ok, Result
from storefront.shared.infrastructure.identity.memory_identity import InMemoryIdentityProvider
from storefront.shared.infrastructure.records.memory_records import InMemoryRecordStore

EMAIL = "a@b.com"
PASSWORD = "secret1"
USER_ID = "u1"


class BlockingIdentityProvider(InMemoryIdentityProvider):
    """Holds every credential check until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.entered = asyncio.Event()

    async def verify_credentials(self, email: str, password: str) -> Result[str]:
        self.entered.set()
        await self.release.wait()
        return await super().verify_credentials(email, password)


class NoUserIdIdentityProvider(InMemoryIdentityProvider):
    async def verify_credentials(self, email: str, password: str) -> Result[Optional[str]]:
        self.call_counts["verify_credentials"] += 1
        return Ok(None)


class ExplodingIdentityProvider(InMemoryIdentityProvider):
    async def verify_credentials(self, email: str, password: str) -> Result[str]:
        raise RuntimeError("provider blew up")

    async def send_password_reset(self, email: str) -> Result[None]:
        raise RuntimeError("provider blew up")


class BlockingRecordStore(InMemoryRecordStore):
    """Holds every field read until ``release`` is set."""

    def __init__(self, records=None) -> None:
        super().__init__(records)
        self.release = asyncio.Event()
        self.entered = asyncio.Event()

    async def get_field(self, user_id: str, field: str) -> Result[Any]:
        self.entered.set()
        await self.release.wait()
        return await super().get_field(user_id, field)


class FailingRecordStore(InMemoryRecordStore):
    """Every read and write fails with a transport error."""

    async def get_field(self, user_id: str, field: str) -> Result[Any]:
        self.call_counts["get_field"] += 1
        return Err(TransportError("Record store request failed: Permission denied", code="401"))

    async def put_record(self, user_id: str, data: dict) -> Result[None]:
        self.call_counts["put_record"] += 1
        return Err(TransportError("Record store request failed: Permission denied", code="401"))

    async def set_field(self, user_id: str, field: str, value: Any) -> Result[None]:
        return Err(TransportError("Record store request failed: Permission denied", code="401"))


@pytest.fixture
def identity():
    provider = InMemoryIdentityProvider()
    provider.add_account(EMAIL, PASSWORD, user_id=USER_ID)
    return provider


@pytest.fixture
def records():
    return InMemoryRecordStore({USER_ID: {"email": EMAIL, "name": "Alice", "banned": False}})


@pytest.fixture
def scope():
    scope = LifecycleScope("test")
    yield scope
    scope.close()


@pytest.fixture
def event_bus():
    return EventBus()


async def settle(event_bus: Optional[EventBus] = None) -> None:
    """Let launched publish tasks and bus handlers run to completion."""
    for _ in range(5):
        await asyncio.sleep(0)
    if event_bus is not None:
        await event_bus.wait_until_idle(timeout=1.0)
