"""Relay core: subscription manager, loop dispatcher and runner."""

from homerelay.relay.dispatch import LoopDispatcher
from homerelay.relay.runner import run_relay
from homerelay.relay.subscription import SubscriptionManager, SubscriptionState

__all__ = [
    "LoopDispatcher",
    "SubscriptionManager",
    "SubscriptionState",
    "run_relay",
]
