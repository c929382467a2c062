"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
OUTPUT_DIR = PROJECT_ROOT / "output"

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = Path(os.getenv("LOG_FILE", str(LOG_DIR / "relay.jsonl")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

# Google Home notifier (form POST with a single "text" field)
NOTIFIER_URL = os.getenv("NOTIFIER_URL", "").strip()
NOTIFIER_TIMEOUT_SECONDS = float(os.getenv("NOTIFIER_TIMEOUT_SECONDS", "10.0"))

# Firebase Realtime Database
FIREBASE_DATABASE_URL = os.getenv("FIREBASE_DATABASE_URL", "").rstrip("/")
FIREBASE_CREDENTIALS = Path(os.getenv("FIREBASE_CREDENTIALS", "serviceAccountKey.json"))
FIREBASE_APP_NAME = os.getenv("FIREBASE_APP_NAME", "homerelay")

# Watched record
WATCH_PATH = os.getenv("WATCH_PATH", "/linebot/receive")
MESSAGE_FIELD = os.getenv("MESSAGE_FIELD", "message")

# Seconds to wait for in-flight notifications on shutdown
SHUTDOWN_DRAIN_SECONDS = float(os.getenv("SHUTDOWN_DRAIN_SECONDS", "5.0"))

REQUIRED_SETTINGS = {
    "NOTIFIER_URL": NOTIFIER_URL,
    "FIREBASE_DATABASE_URL": FIREBASE_DATABASE_URL,
}


def missing_settings(*names: str) -> list[str]:
    """Return the names of required settings that are empty (all required settings when none given)."""
    keys = names or tuple(REQUIRED_SETTINGS)
    return [k for k in keys if not REQUIRED_SETTINGS.get(k)]
