"""Lifecycle-scoped task management.

A ``LifecycleScope`` plays the role of a screen-owned task scope: every
operation a state machine starts is launched through it, and closing the scope
cancels those tasks and invalidates its ``CancellationToken`` so that any
continuation still running can no longer write state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Flag shared between a scope and the state containers bound to it."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ScopeClosedError(RuntimeError):
    """Raised when launching work in a scope that has already been closed."""


class LifecycleScope:
    """Owns the tasks started on behalf of one UI component."""

    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self.token = CancellationToken()
        self._tasks: set[asyncio.Task] = set()

    @property
    def is_active(self) -> bool:
        return not self.token.is_cancelled

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def launch(self, coro: Coroutine[Any, Any, T], name: Optional[str] = None) -> asyncio.Task[T]:
        """Schedule ``coro`` as a task owned by this scope.

        Raises:
            ScopeClosedError: If the scope has already been closed
        """
        if not self.is_active:
            coro.close()
            raise ScopeClosedError(f"Scope '{self.name}' is closed")

        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def close(self) -> None:
        """Invalidate the token and cancel every task still in flight."""
        if not self.is_active:
            return
        self.token.cancel()
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug(f"Scope '{self.name}' closed, cancelled {len(pending)} task(s)")

    async def aclose(self) -> None:
        """Close the scope and wait until cancelled tasks have unwound."""
        tasks = list(self._tasks)
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
