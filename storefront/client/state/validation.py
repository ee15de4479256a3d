"""Synchronous input checks run before any provider call.

Each helper returns ``None`` when the input is acceptable, or the
``ValidationError`` to surface.
"""

from __future__ import annotations

import re
from typing import Optional

from storefront.shared.core.errors import ValidationError

EMAIL_REQUIRED = "Email must not be empty"
EMAIL_CANNOT_BE_EMPTY = "Email cannot be empty"
EMAIL_INVALID = "Please enter a valid email"
NAME_REQUIRED = "Name must not be empty"
PASSWORD_TOO_SHORT = "Password must be at least {min_length} characters"
PASSWORD_MISMATCH = "Password does not match"
CURRENT_PASSWORD_REQUIRED = "Current password must not be empty"
NEW_PASSWORD_REQUIRED = "New password must not be empty"
NEW_PASSWORD_TOO_SHORT = "Password must be at least {min_length} characters long"
NEW_PASSWORD_TOO_WEAK = "Password must include uppercase, lowercase, number, and special character"
CONFIRM_NEW_PASSWORD_INVALID = "Confirm new password must not be empty and must match the new password"

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._-]+@[a-z]+\.+[a-z]+")


def require_email(email: str, message: str = EMAIL_REQUIRED) -> Optional[ValidationError]:
    if not email:
        return ValidationError(message, code="EMAIL_REQUIRED")
    return None


def check_email_format(email: str) -> Optional[ValidationError]:
    """Presence first, then shape."""
    missing = require_email(email, EMAIL_CANNOT_BE_EMPTY)
    if missing:
        return missing
    if not EMAIL_PATTERN.fullmatch(email):
        return ValidationError(EMAIL_INVALID, code="EMAIL_INVALID")
    return None


def require_name(name: str) -> Optional[ValidationError]:
    if not name:
        return ValidationError(NAME_REQUIRED, code="NAME_REQUIRED")
    return None


def check_password_length(password: str, min_length: int = 6) -> Optional[ValidationError]:
    if len(password) < min_length:
        return ValidationError(PASSWORD_TOO_SHORT.format(min_length=min_length), code="PASSWORD_TOO_SHORT")
    return None


def check_passwords_match(password: str, confirm_password: str) -> Optional[ValidationError]:
    if password != confirm_password:
        return ValidationError(PASSWORD_MISMATCH, code="PASSWORD_MISMATCH")
    return None


def check_new_password(
    old_password: str,
    new_password: str,
    confirm_new_password: str,
    min_length: int = 8,
) -> Optional[ValidationError]:
    """Checks for the change-password form, in display order."""
    if not old_password:
        return ValidationError(CURRENT_PASSWORD_REQUIRED, code="CURRENT_PASSWORD_REQUIRED")
    if not new_password:
        return ValidationError(NEW_PASSWORD_REQUIRED, code="NEW_PASSWORD_REQUIRED")
    if len(new_password) < min_length:
        return ValidationError(NEW_PASSWORD_TOO_SHORT.format(min_length=min_length), code="NEW_PASSWORD_TOO_SHORT")

    has_upper = any(c.isupper() for c in new_password)
    has_lower = any(c.islower() for c in new_password)
    has_digit = any(c.isdigit() for c in new_password)
    has_special = any(not c.isalnum() for c in new_password)
    if not (has_upper and has_lower and has_digit and has_special):
        return ValidationError(NEW_PASSWORD_TOO_WEAK, code="NEW_PASSWORD_TOO_WEAK")

    if not confirm_new_password or confirm_new_password != new_password:
        return ValidationError(CONFIRM_NEW_PASSWORD_INVALID, code="CONFIRM_NEW_PASSWORD_INVALID")
    return None
