"""Catalog, cart and order record shapes."""

from storefront.shared.domain.catalog.models import (
    CartItem,
    MediaContent,
    MediaType,
    Order,
    Product,
    ProductComment,
)

__all__ = ["CartItem", "MediaContent", "MediaType", "Order", "Product", "ProductComment"]
