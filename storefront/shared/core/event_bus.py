"""Async event bus for the storefront client.

State machines publish session snapshots and account outcomes here; the
bootstrap, moderation tools and any UI layer subscribe by topic (see
``events`` for the topic names and payload builders).
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeAlias

EventPayload: TypeAlias = Dict[str, Any]
EventHandler: TypeAlias = Callable[[EventPayload], Awaitable[None]]

logger = logging.getLogger(__name__)


class EventBus:
    """Topic-based pub/sub; every handler runs in its own task."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._guard: Optional[asyncio.Lock] = None
        self._guard_loop: Optional[asyncio.AbstractEventLoop] = None
        self._in_flight: set[asyncio.Task] = set()

    def _lock(self) -> asyncio.Lock:
        # One lock per loop; the bus may be built before any loop runs
        loop = asyncio.get_running_loop()
        if self._guard is None or self._guard_loop is not loop:
            self._guard = asyncio.Lock()
            self._guard_loop = loop
        return self._guard

    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Register ``handler`` for ``topic``; registering twice is a no-op."""
        async with self._lock():
            registered = self._handlers[topic]
            if handler not in registered:
                registered.append(handler)

    async def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        async with self._lock():
            registered = self._handlers.get(topic)
            if registered and handler in registered:
                registered.remove(handler)

    def subscriber_count(self, topic: str) -> int:
        return len(self._handlers.get(topic, ()))

    async def publish(self, topic: str, payload: EventPayload) -> None:
        """Fan ``payload`` out to the handlers registered for ``topic``.

        Returns once the handler tasks are scheduled; use ``wait_until_idle``
        to wait for them.
        """
        async with self._lock():
            targets = tuple(self._handlers.get(topic, ()))

        if not targets:
            logger.debug(f"Dropped '{topic}' event: no subscribers")
            return

        for handler in targets:
            task = asyncio.create_task(
                self._deliver(topic, handler, payload),
                name=f"event:{topic}",
            )
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
        logger.debug(f"Delivering '{topic}' to {len(targets)} handler(s)")

    async def wait_until_idle(self, timeout: float = 10.0) -> bool:
        """Block until no handler task is running.

        Args:
            timeout: Maximum time to wait in seconds

        Returns:
            True if every handler finished, False on timeout
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self._in_flight:
            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(f"Event bus still busy after {timeout}s ({len(self._in_flight)} handler(s))")
                return False
            # Handlers may publish further events
            await asyncio.wait(tuple(self._in_flight), timeout=remaining)
        return True

    @staticmethod
    async def _deliver(topic: str, handler: EventHandler, payload: EventPayload) -> None:
        try:
            await handler(payload)
        except Exception:
            name = getattr(handler, "__qualname__", repr(handler))
            logger.exception(f"Handler {name} failed on '{topic}'")

    def clear(self) -> None:
        """Drop every subscription."""
        self._handlers.clear()
