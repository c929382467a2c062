"""Subscription manager: one live listener on the watched path, relaying messages to the notifier."""

import threading
from enum import Enum
from typing import Any, Callable

from homerelay.errors import SubscriptionStateError
from homerelay.models import ChangeEvent, StoreError
from homerelay.store.protocol import OnChange, OnError, RealtimeStore, Subscription
from homerelay.utils.logger import get_logger

logger = get_logger("homerelay.relay.subscription")


class SubscriptionState(str, Enum):
    UNSTARTED = "unstarted"
    SUBSCRIBED = "subscribed"
    STOPPED = "stopped"


class SubscriptionManager:
    """Owns the single subscription for the process lifetime.

    dispatch receives each non-empty message; it must not block (see
    LoopDispatcher). Lifecycle is UNSTARTED -> SUBSCRIBED -> STOPPED; a
    second start() is rejected. Usable as a context manager around start():

        with manager.start(path):
            ...
    """

    def __init__(self, store: RealtimeStore, dispatch: Callable[[str], Any]):
        self._store = store
        self._dispatch = dispatch
        self._lock = threading.Lock()
        self._state = SubscriptionState.UNSTARTED
        self._handle: Subscription | None = None
        self._path: str | None = None
        self._stats = {"events_seen": 0, "relayed": 0, "skipped": 0, "errors": 0}

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def path(self) -> str | None:
        return self._path

    def stats(self) -> dict[str, int]:
        with self._lock:
            return dict(self._stats)

    def _count(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1

    def start(
        self,
        path: str,
        on_change: OnChange | None = None,
        on_error: OnError | None = None,
    ) -> "SubscriptionManager":
        """Register interest in path and return immediately."""
        with self._lock:
            if self._state is not SubscriptionState.UNSTARTED:
                raise SubscriptionStateError(
                    f"Subscription already {self._state.value} (path={self._path!r}); start() may be called once"
                )
            self._state = SubscriptionState.SUBSCRIBED
            self._path = path
        try:
            handle = self._store.listen(
                path,
                on_change or self.handle_change,
                on_error or self.handle_error,
            )
        except Exception:
            with self._lock:
                self._state = SubscriptionState.UNSTARTED
                self._path = None
            raise
        with self._lock:
            self._handle = handle
        logger.info("relay.subscription.started", path=path)
        return self

    def handle_change(self, snapshot: ChangeEvent) -> bool:
        """Relay snapshot.message when it is a non-empty string. Returns True when dispatched."""
        self._count("events_seen")
        message = snapshot.message
        if not message:
            self._count("skipped")
            logger.debug(
                "relay.change.skip_no_message",
                path=snapshot.path,
                fields=sorted(snapshot.fields),
            )
            return False
        try:
            self._dispatch(message)
        except Exception as e:
            self._count("errors")
            logger.exception("relay.change.dispatch_error", path=snapshot.path, error=str(e))
            return False
        self._count("relayed")
        logger.info("relay.change.relayed", path=snapshot.path, message=message)
        return True

    def handle_error(self, error: StoreError) -> None:
        """Log a read failure. No reconnect here; the store client's own stream handling applies."""
        self._count("errors")
        logger.error(
            "relay.subscription.read_failed",
            path=error.path,
            code=error.code,
            detail=error.detail,
        )

    def stop(self) -> None:
        """Close the subscription handle. Safe to call more than once."""
        with self._lock:
            if self._state is SubscriptionState.STOPPED:
                return
            self._state = SubscriptionState.STOPPED
            handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except Exception as e:
            logger.warning("relay.subscription.close_error", path=self._path, error=str(e))
        logger.info("relay.subscription.stopped", path=self._path, **self.stats())

    def __enter__(self) -> "SubscriptionManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
