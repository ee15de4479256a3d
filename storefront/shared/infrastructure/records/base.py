"""Account record store contract (key-value documents keyed by user id)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from storefront.shared.core.results import Result


class AccountRecordStore(ABC):
    """Get/set access to the account records node."""

    @abstractmethod
    async def get_field(self, user_id: str, field: str) -> Result[Any]:
        """Read one field; ``Ok(None)`` when the field is absent."""

    @abstractmethod
    async def set_field(self, user_id: str, field: str, value: Any) -> Result[None]:
        """Write one field of a record."""

    @abstractmethod
    async def get_record(self, user_id: str) -> Result[Dict[str, Any] | None]:
        """Read a whole record; ``Ok(None)`` when there is none."""

    @abstractmethod
    async def put_record(self, user_id: str, data: Dict[str, Any]) -> Result[None]:
        """Replace a whole record."""

    @abstractmethod
    async def list_records(self) -> Result[Dict[str, Dict[str, Any]]]:
        """Read every record, keyed by user id."""

    async def aclose(self) -> None:
        """Release any held resources."""
