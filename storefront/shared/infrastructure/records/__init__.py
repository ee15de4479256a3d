"""Account record stores (Firebase Realtime Database, in-memory)."""

from storefront.shared.infrastructure.records.base import AccountRecordStore
from storefront.shared.infrastructure.records.firebase_records import FirebaseRealtimeRecordStore
from storefront.shared.infrastructure.records.memory_records import InMemoryRecordStore

__all__ = [
    "AccountRecordStore",
    "FirebaseRealtimeRecordStore",
    "InMemoryRecordStore",
]
