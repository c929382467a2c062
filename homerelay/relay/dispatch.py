"""Thread-safe hand-off from the store's listener thread to the notifier's event loop."""

import asyncio
import threading
from concurrent.futures import Future

from homerelay.models import NotificationResult
from homerelay.notifier import Notifier
from homerelay.utils.logger import get_logger

logger = get_logger("homerelay.relay.dispatch")


class LoopDispatcher:
    """Schedules Notifier.send on loop and returns without waiting.

    Callable from any thread, including the loop's own. In-flight sends are
    tracked so shutdown can wait for them (drain).
    """

    def __init__(self, notifier: Notifier, loop: asyncio.AbstractEventLoop):
        self._notifier = notifier
        self._loop = loop
        self._lock = threading.Lock()
        self._pending: set[Future[NotificationResult]] = set()

    def __call__(self, text: str) -> Future[NotificationResult] | None:
        if self._loop.is_closed():
            logger.warning("relay.dispatch.loop_closed", text=text)
            return None
        future = asyncio.run_coroutine_threadsafe(self._notifier.send(text), self._loop)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._done)
        return future

    def _done(self, future: Future[NotificationResult]) -> None:
        with self._lock:
            self._pending.discard(future)
        if future.cancelled():
            logger.debug("relay.dispatch.cancelled")
            return
        exc = future.exception()
        if exc is not None:
            logger.error("relay.dispatch.send_error", error=str(exc))

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    async def drain(self, timeout: float) -> int:
        """Wait up to timeout seconds for in-flight sends. Returns how many were still pending."""
        with self._lock:
            futures = list(self._pending)
        if not futures:
            return 0
        logger.info("relay.dispatch.draining", pending=len(futures), timeout=timeout)
        _, still_pending = await asyncio.wait(
            [asyncio.wrap_future(f) for f in futures],
            timeout=timeout,
        )
        if still_pending:
            logger.warning("relay.dispatch.drain_timeout", timeout=timeout, pending=len(still_pending))
        return len(still_pending)
