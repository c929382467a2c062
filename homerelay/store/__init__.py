"""Realtime store: protocol, Firebase implementation and in-memory mock."""

from homerelay.store.protocol import OnChange, OnError, RealtimeStore, Subscription
from homerelay.store.memory_mock import MemoryStore
from homerelay.store.mapping import apply_event, build_record

__all__ = [
    "OnChange",
    "OnError",
    "RealtimeStore",
    "Subscription",
    "MemoryStore",
    "apply_event",
    "build_record",
]
