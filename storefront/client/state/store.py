"""Single-writer state container.

One state machine writes; any number of observers read. Writes are refused
once the owning scope has been closed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generic, List, Optional, TypeVar

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.lifecycle import LifecycleScope

from .models import UiState

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=UiState)
StateListener = Callable[[S], None]


class StateStore(Generic[S]):
    """Holds the current snapshot of one screen and notifies observers.

    Usage:
        store = StateStore(SessionState(), scope, name="sign_in")
        unsubscribe = store.subscribe(render)
        store.update(is_loading=True)
    """

    def __init__(
        self,
        initial: S,
        scope: LifecycleScope,
        name: str,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._value = initial
        self._scope = scope
        self.name = name
        self._event_bus = event_bus
        self._listeners: List[StateListener] = []

    @property
    def value(self) -> S:
        return self._value

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register an observer; it immediately receives the current snapshot.

        Returns:
            A callable that removes the observer
        """
        self._listeners.append(listener)
        listener(self._value)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> S:
        """Replace the snapshot with a copy carrying ``changes``.

        Unchanged snapshots notify nobody. After the scope has closed the
        write is dropped and the last snapshot is returned.
        """
        if self._scope.token.is_cancelled:
            logger.debug(f"[{self.name}] Dropped write after scope close: {sorted(changes)}")
            return self._value

        new_value = self._value.evolve(**changes)
        if new_value == self._value:
            return self._value

        self._value = new_value
        for listener in list(self._listeners):
            try:
                listener(new_value)
            except Exception:
                logger.exception(f"[{self.name}] State listener failed")
        self._publish(new_value)
        return new_value

    def _publish(self, snapshot: S) -> None:
        if self._event_bus is None:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._scope.launch(
            self._event_bus.publish(
                events.TOPIC_SESSION_STATE,
                events.create_session_state_event(self.name, snapshot.public_dict()),
            ),
            name=f"{self.name}-state-publish",
        )
