"""Shared CLI helpers: console, logger, store construction, result printing."""

from rich.console import Console

from homerelay.errors import ConfigError, StoreConnectionError
from homerelay.models import NotificationResult
from homerelay.utils.logger import get_logger

console = Console()
logger = get_logger("homerelay.cli")


def get_firebase_store():
    """Build the Firebase store from config; prints and re-raises on failure."""
    from homerelay.store.firebase_real import FirebaseStore

    try:
        return FirebaseStore.from_config()
    except (ConfigError, StoreConnectionError) as e:
        console.print(f"[red]Store error: {e}[/red]")
        logger.error("cli.store_init_failed", error=str(e))
        raise


def print_result(result: NotificationResult) -> None:
    """Print one notifier outcome."""
    if result.ok:
        console.print(f"[green]Delivered[/green] ({result.status_code}, {result.elapsed_ms:.0f} ms)")
        if result.body:
            console.print(f"  Response: {result.body}")
    else:
        console.print(f"[red]Failed[/red]: {result.error}")
        if result.body:
            console.print(f"  Response: {result.body}")
