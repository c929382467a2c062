"""Exception types raised by the relay."""


class RelayError(Exception):
    """Base class for relay errors."""


class ConfigError(RelayError):
    """Startup configuration is missing or invalid."""


class StoreConnectionError(RelayError):
    """The realtime store client could not be initialised."""


class SubscriptionStateError(RelayError):
    """Subscription lifecycle violated (double start, start after stop)."""
