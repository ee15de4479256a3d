"""Human-readable descriptions for identity provider error codes."""

from __future__ import annotations

from typing import Optional

ERROR_MESSAGES: dict[str, str] = {
    "EMAIL_NOT_FOUND": "There is no user record corresponding to this identifier. The user may have been deleted.",
    "INVALID_PASSWORD": "The password is invalid or the user does not have a password.",
    "INVALID_LOGIN_CREDENTIALS": "The supplied auth credential is incorrect, malformed or has expired.",
    "USER_DISABLED": "The user account has been disabled by an administrator.",
    "EMAIL_EXISTS": "The email address is already in use by another account.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "MISSING_EMAIL": "An email address must be provided.",
    "MISSING_PASSWORD": "A password must be provided.",
    "WEAK_PASSWORD": "The given password is invalid. Password should be at least 6 characters.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "We have blocked all requests from this device due to unusual activity. Try again later.",
    "OPERATION_NOT_ALLOWED": "Password sign-in is disabled for this project.",
    "INVALID_ID_TOKEN": "The user's credential is no longer valid. The user must sign in again.",
    "TOKEN_EXPIRED": "The user's credential has expired. The user must sign in again.",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "This operation is sensitive and requires recent authentication. Log in again before retrying this request.",
}

# Codes that mean the session token, rather than the password, is the problem
EXPIRED_SESSION_CODES = frozenset({"INVALID_ID_TOKEN", "TOKEN_EXPIRED", "CREDENTIAL_TOO_OLD_LOGIN_AGAIN"})

# Codes that mean the supplied password was wrong
INVALID_CREDENTIAL_CODES = frozenset({"INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS", "EMAIL_NOT_FOUND"})


def normalize_code(raw: Optional[str]) -> Optional[str]:
    """Strip the detail suffix: ``"WEAK_PASSWORD : Password should..."`` -> ``"WEAK_PASSWORD"``."""
    if not raw:
        return None
    return raw.split(":", 1)[0].strip() or None


def describe(code: Optional[str], fallback: str = "An internal error has occurred.") -> str:
    if code is None:
        return fallback
    return ERROR_MESSAGES.get(code, fallback)
