"""Shared plumbing for the account screen state machines."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Generic, Optional, TypeVar

from storefront.shared.core.event_bus import EventBus, EventPayload
from storefront.shared.core.lifecycle import LifecycleScope

from .models import UiState
from .store import StateStore

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=UiState)
T = TypeVar("T")

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class StateMachine(Generic[S]):
    """Owns a ``StateStore`` and launches its operations in a lifecycle scope.

    Subclasses set ``screen`` and call ``_update`` between suspension points.
    At most one operation per machine is in flight at a time.
    """

    screen = "screen"

    def __init__(
        self,
        initial: S,
        scope: Optional[LifecycleScope] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.scope = scope or LifecycleScope(self.screen)
        self.event_bus = event_bus
        self._store: StateStore[S] = StateStore(initial, self.scope, self.screen, event_bus)
        self._in_flight: Optional[asyncio.Task] = None

    @property
    def state(self) -> S:
        return self._store.value

    @property
    def busy(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    def subscribe(self, listener: Callable[[S], None]) -> Callable[[], None]:
        return self._store.subscribe(listener)

    def close(self) -> None:
        """Tear down: cancel in-flight work and freeze the state."""
        self.scope.close()

    def _update(self, **changes: Any) -> S:
        return self._store.update(**changes)

    def _launch(self, coro: Coroutine[Any, Any, T], name: str) -> asyncio.Task[T]:
        task = self.scope.launch(coro, name=f"{self.screen}-{name}")
        self._in_flight = task
        return task

    def _reject_if_busy(self, operation: str) -> Optional[asyncio.Task]:
        """Return the in-flight task when another operation is running."""
        if self.busy:
            logger.warning(f"[{self.screen}] Ignoring {operation}: an operation is already in flight")
            return self._in_flight
        return None

    async def _emit(self, topic: str, payload: EventPayload) -> None:
        if self.event_bus is not None and self.scope.is_active:
            await self.event_bus.publish(topic, payload)
