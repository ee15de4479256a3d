"""
Shared Config Module
====================

Configuration files shipped with the storefront client.

Structure:
- settings/defaults.yaml: system defaults
- settings/user.yaml: optional user overrides (not shipped)
"""

from pathlib import Path

SETTINGS_DIR = Path(__file__).resolve().parent / "settings"

__all__ = ["SETTINGS_DIR"]
