"""Account record shapes stored under the users node of the record store."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

CREATED_AT_FORMAT = "%d/%m/%Y %H:%M:%S"

# Field consulted by the post sign-in authorization check
BANNED_FIELD = "banned"


def current_formatted_date(now: Optional[datetime] = None) -> str:
    """Format a timestamp the way account records store ``createdAt``."""
    return (now or datetime.now()).strftime(CREATED_AT_FORMAT)


class AccountRecord(BaseModel):
    """Profile and moderation fields for one account.

    ``banned`` defaults to False; a record without the flag is treated as not
    banned.
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: str = ""
    email: str = ""
    name: str = ""
    created_at: str = Field(default_factory=current_formatted_date, alias="createdAt")
    photo_url: str = Field(default="", alias="photoUrl")
    banned: bool = False

    @classmethod
    def from_store(cls, user_id: str, data: Dict[str, Any]) -> "AccountRecord":
        """Build a record from the raw node, keyed by ``user_id``.

        Older records keep the avatar under ``profileImageUrl``.
        """
        payload = dict(data)
        if not payload.get("photoUrl") and payload.get("profileImageUrl"):
            payload["photoUrl"] = payload["profileImageUrl"]
        payload["id"] = user_id
        return cls.model_validate(payload)

    def to_store(self) -> Dict[str, Any]:
        """Wire shape written to the record store (the id is the node key)."""
        return self.model_dump(by_alias=True, exclude={"id"})
