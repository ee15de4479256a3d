"""Canonical event definitions for the storefront client."""

from __future__ import annotations

import time
from typing import Any, Dict, Literal

from .event_bus import EventPayload

# Event Topics
TOPIC_LOGS_EVENT = "logs.event"
TOPIC_SESSION_STATE = "session.state"

# Authentication outcomes
TOPIC_SIGNED_IN = "auth.signed_in"
TOPIC_ACCESS_DENIED = "auth.access_denied"
TOPIC_PASSWORD_RESET_SENT = "auth.password_reset_sent"

# Account lifecycle
TOPIC_ACCOUNT_CREATED = "account.created"
TOPIC_PASSWORD_CHANGED = "account.password_changed"
TOPIC_BAN_CHANGED = "account.ban_changed"


def create_logs_event(
    message: str,
    level: Literal["info", "warning", "error", "success"] = "info",
    topic: str | None = None,
) -> EventPayload:
    """Create a Log event."""
    return {
        "message": message,
        "level": level,
        "topic": topic,
        "ts": time.time(),
    }


def create_session_state_event(screen: str, snapshot: Dict[str, Any]) -> EventPayload:
    """Create a state snapshot event.

    Args:
        screen: Name of the state machine that produced the snapshot
        snapshot: The full snapshot, as a plain dict
    """
    return {
        "screen": screen,
        "state": snapshot,
    }


def create_signed_in_event(user_id: str | None, email: str) -> EventPayload:
    """Create a signed-in event (credentials verified and account not banned)."""
    return {
        "user_id": user_id,
        "email": email,
    }


def create_access_denied_event(user_id: str, reason: str) -> EventPayload:
    """Create an access denied event for a verified but unauthorized account."""
    return {
        "user_id": user_id,
        "reason": reason,
    }


def create_password_reset_sent_event(email: str) -> EventPayload:
    return {"email": email}


def create_account_created_event(user_id: str, email: str, name: str) -> EventPayload:
    return {
        "user_id": user_id,
        "email": email,
        "name": name,
    }


def create_password_changed_event(user_id: str) -> EventPayload:
    return {"user_id": user_id}


def create_ban_changed_event(user_id: str, banned: bool) -> EventPayload:
    """Create a moderation event for a ban flag change."""
    return {
        "user_id": user_id,
        "banned": banned,
    }
