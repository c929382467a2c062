"""Relay lifecycle: subscribe, run until stopped, then release the subscription and drain sends."""

import asyncio
from typing import Any

from homerelay.config import SHUTDOWN_DRAIN_SECONDS
from homerelay.notifier import Notifier
from homerelay.relay.dispatch import LoopDispatcher
from homerelay.relay.subscription import SubscriptionManager
from homerelay.store.protocol import RealtimeStore
from homerelay.utils.logger import get_logger

logger = get_logger("homerelay.relay.runner")


async def run_relay(
    store: RealtimeStore,
    notifier: Notifier,
    path: str,
    stop_event: asyncio.Event,
    drain_seconds: float = SHUTDOWN_DRAIN_SECONDS,
) -> dict[str, Any]:
    """Watch path and relay messages until stop_event is set. Returns subscription stats."""
    loop = asyncio.get_running_loop()
    dispatcher = LoopDispatcher(notifier, loop)
    manager = SubscriptionManager(store, dispatcher)

    manager.start(path)
    try:
        await stop_event.wait()
    finally:
        # Closing the SDK listener joins its thread
        await asyncio.to_thread(manager.stop)
        remaining = await dispatcher.drain(drain_seconds)
        stats = {**manager.stats(), "undelivered_at_shutdown": remaining}
        logger.info("relay.runner.stopped", path=path, **stats)
    return stats
