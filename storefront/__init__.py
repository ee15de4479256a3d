"""Storefront account client package."""

from .shared.core.event_bus import EventBus
from .shared.core.lifecycle import LifecycleScope

__all__ = ["EventBus", "LifecycleScope"]
