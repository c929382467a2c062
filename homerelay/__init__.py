"""homerelay: relay Firebase Realtime Database messages to a Google Home notifier."""

__version__ = "0.1.0"
