"""
Shared Core Module
==================

Event system, configuration, results, errors and lifecycle scopes.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Results & Errors
from .errors import (
    StorefrontError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    TransportError,
)
from .results import Ok, Err, Result

# Lifecycle
from .lifecycle import CancellationToken, LifecycleScope, ScopeClosedError

# Configuration
from .configuration import (
    BackendType,
    ConfigManager,
    SystemConfig,
    get_config_manager,
    get_config,
    ValidationLevel,
)

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Results & Errors
    "StorefrontError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "TransportError",
    "Ok",
    "Err",
    "Result",
    # Lifecycle
    "CancellationToken",
    "LifecycleScope",
    "ScopeClosedError",
    # Configuration
    "BackendType",
    "ConfigManager",
    "SystemConfig",
    "get_config_manager",
    "get_config",
    "ValidationLevel",
]
