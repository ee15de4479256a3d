"""
Shared Domain Module
====================

Account records, moderation and catalog shapes.
"""

# Accounts
from storefront.shared.domain.accounts import AccountRecord, AccountModerationService

# Catalog
from storefront.shared.domain.catalog import CartItem, Order, Product, ProductComment

__all__ = [
    # Accounts
    "AccountRecord",
    "AccountModerationService",
    # Catalog
    "CartItem",
    "Order",
    "Product",
    "ProductComment",
]
