"""Account records and moderation."""

from storefront.shared.domain.accounts.models import (
    AccountRecord,
    BANNED_FIELD,
    current_formatted_date,
)
from storefront.shared.domain.accounts.moderation import AccountModerationService

__all__ = [
    "AccountRecord",
    "BANNED_FIELD",
    "current_formatted_date",
    "AccountModerationService",
]
