"""Realtime store protocol (value-listener interface)."""

from typing import Any, Callable, Protocol

from homerelay.models import ChangeEvent, StoreError

OnChange = Callable[[ChangeEvent], Any]
OnError = Callable[[StoreError], Any]


class Subscription(Protocol):
    """Handle for one live listener; close() releases it."""

    def close(self) -> None:
        ...


class RealtimeStore(Protocol):
    """Abstract interface for watching and writing one record path."""

    def listen(self, path: str, on_change: OnChange, on_error: OnError) -> Subscription:
        """Subscribe to path. on_change gets the full record after every write (and once on subscribe).
        Read failures go to on_error; listen itself returns without blocking."""
        ...

    def set_message(self, path: str, text: str) -> dict[str, Any]:
        """Overwrite the record at path with {message, timestamp}; returns the written record."""
        ...
