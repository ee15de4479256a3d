"""Moderation actions on account records."""

from __future__ import annotations

import logging
from typing import List, Optional

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.shared.core.results import Err, Ok, Result
from storefront.shared.domain.accounts.models import BANNED_FIELD, AccountRecord
from storefront.shared.infrastructure.records.base import AccountRecordStore

logger = logging.getLogger(__name__)


class AccountModerationService:
    """Lists accounts and flips their ban flag."""

    def __init__(self, records: AccountRecordStore, event_bus: Optional[EventBus] = None):
        self.records = records
        self.event_bus = event_bus

    async def list_accounts(self) -> Result[List[AccountRecord]]:
        result = await self.records.list_records()
        if isinstance(result, Err):
            logger.error(f"Failed to load accounts: {result.message}")
            return result
        return Ok([AccountRecord.from_store(user_id, data) for user_id, data in result.value.items()])

    async def set_banned(self, user_id: str, banned: bool) -> Result[None]:
        """Write the ban flag; a banned account is refused at its next sign-in."""
        result = await self.records.set_field(user_id, BANNED_FIELD, banned)
        if isinstance(result, Err):
            logger.error(f"Failed to update ban flag for {user_id}: {result.message}")
            return result

        logger.info(f"Account {user_id} banned={banned}")
        if self.event_bus is not None:
            await self.event_bus.publish(
                events.TOPIC_BAN_CHANGED,
                events.create_ban_changed_event(user_id, banned),
            )
        return Ok(None)

    async def toggle_ban(self, account: AccountRecord) -> Result[AccountRecord]:
        result = await self.set_banned(account.id, not account.banned)
        if isinstance(result, Err):
            return result
        return Ok(account.model_copy(update={"banned": not account.banned}))
