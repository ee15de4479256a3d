"""
Storefront Shared Kernel
========================

Account/session logic and infrastructure shared by the storefront client.

Architecture:
- core: EventBus, configuration, results, errors, lifecycle scopes
- infrastructure: identity provider and record store adapters
- domain: account records, moderation, catalog shapes
"""

__version__ = "1.0.0"

__all__ = []
