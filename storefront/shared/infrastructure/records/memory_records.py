"""In-process account record store for local development and tests."""

from __future__ import annotations

import copy
from collections import Counter
from typing import Any, Dict, Optional

from storefront.shared.core.results import Ok, Result
from storefront.shared.infrastructure.records.base import AccountRecordStore


class InMemoryRecordStore(AccountRecordStore):
    """Dict-backed store; values are deep-copied in and out."""

    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self._records: Dict[str, Dict[str, Any]] = copy.deepcopy(records or {})
        self.call_counts: Counter[str] = Counter()

    async def get_field(self, user_id: str, field: str) -> Result[Any]:
        self.call_counts["get_field"] += 1
        return Ok(copy.deepcopy(self._records.get(user_id, {}).get(field)))

    async def set_field(self, user_id: str, field: str, value: Any) -> Result[None]:
        self.call_counts["set_field"] += 1
        self._records.setdefault(user_id, {})[field] = copy.deepcopy(value)
        return Ok(None)

    async def get_record(self, user_id: str) -> Result[Dict[str, Any] | None]:
        self.call_counts["get_record"] += 1
        record = self._records.get(user_id)
        return Ok(copy.deepcopy(record) if record is not None else None)

    async def put_record(self, user_id: str, data: Dict[str, Any]) -> Result[None]:
        self.call_counts["put_record"] += 1
        self._records[user_id] = copy.deepcopy(data)
        return Ok(None)

    async def list_records(self) -> Result[Dict[str, Dict[str, Any]]]:
        self.call_counts["list_records"] += 1
        return Ok(copy.deepcopy(self._records))
