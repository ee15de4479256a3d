"""Storefront client: account screen state and service wiring."""

from storefront.client.bootstrap import ClientServices, init_services

__all__ = ["ClientServices", "init_services"]
