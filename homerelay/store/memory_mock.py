"""In-memory realtime store: same listener semantics as Firebase, no network."""

import copy
import threading
from typing import Any

from homerelay.config import MESSAGE_FIELD
from homerelay.models import ChangeEvent, StoreError
from homerelay.store.mapping import apply_event, build_record, split_path
from homerelay.store.protocol import OnChange, OnError
from homerelay.utils.logger import get_logger

logger = get_logger("homerelay.store.memory")


class MemorySubscription:
    def __init__(self, store: "MemoryStore", path: str, on_change: OnChange, on_error: OnError):
        self.path = path
        self.on_change = on_change
        self.on_error = on_error
        self._store = store
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._store._remove(self)


class MemoryStore:
    """Records keyed by normalised path. Writes notify listeners synchronously on the writer's thread."""

    def __init__(self, message_field: str = MESSAGE_FIELD):
        self._message_field = message_field
        self._records: dict[str, Any] = {}
        self._listeners: list[MemorySubscription] = []
        self._lock = threading.Lock()

    @staticmethod
    def _key(path: str) -> str:
        return "/" + "/".join(split_path(path))

    def _remove(self, subscription: MemorySubscription) -> None:
        with self._lock:
            if subscription in self._listeners:
                self._listeners.remove(subscription)

    def _snapshot(self, path: str) -> ChangeEvent:
        return ChangeEvent.from_record(path, self._records.get(self._key(path)), self._message_field)

    def _emit(self, path: str) -> None:
        key = self._key(path)
        with self._lock:
            targets = [s for s in self._listeners if self._key(s.path) == key]
            snapshot = self._snapshot(path)
        for subscription in targets:
            subscription.on_change(snapshot)

    def listen(self, path: str, on_change: OnChange, on_error: OnError) -> MemorySubscription:
        subscription = MemorySubscription(self, path, on_change, on_error)
        with self._lock:
            self._listeners.append(subscription)
            snapshot = self._snapshot(path)
        logger.debug("store.memory.listen", path=path)
        on_change(snapshot)
        return subscription

    def listener_count(self, path: str) -> int:
        key = self._key(path)
        with self._lock:
            return sum(1 for s in self._listeners if self._key(s.path) == key)

    def get(self, path: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._records.get(self._key(path)))

    def write(self, path: str, record: Any) -> None:
        """Replace the record at path (a put at the watched root)."""
        key = self._key(path)
        with self._lock:
            self._records[key] = apply_event(self._records.get(key), "put", "/", record)
        self._emit(path)

    def update(self, path: str, fields: dict[str, Any]) -> None:
        """Merge fields into the record at path (a patch); None values delete."""
        key = self._key(path)
        with self._lock:
            self._records[key] = apply_event(self._records.get(key), "patch", "/", fields)
        self._emit(path)

    def set_message(self, path: str, text: str) -> dict[str, Any]:
        record = build_record(text, self._message_field)
        self.write(path, record)
        return record

    def fail(self, path: str, code: str = "permission_denied", detail: str | None = None) -> None:
        """Deliver a read error to every listener on path."""
        key = self._key(path)
        with self._lock:
            targets = [s for s in self._listeners if self._key(s.path) == key]
        for subscription in targets:
            subscription.on_error(StoreError(code=code, path=path, detail=detail))
