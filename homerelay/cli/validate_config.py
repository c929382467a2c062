"""Validate config: print the effective settings and fail on missing required values."""

from rich.table import Table

from homerelay import config
from .shared import console, logger


def validate_config() -> None:
    """Print the effective settings table; exit 1 if required settings or the credentials file are missing."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start")

    errors = [f"{name} is not set" for name in config.missing_settings()]
    if not config.FIREBASE_CREDENTIALS.is_file():
        errors.append(f"FIREBASE_CREDENTIALS file not found: {config.FIREBASE_CREDENTIALS}")

    table = Table(title="homerelay config")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for name, value in (
        ("NOTIFIER_URL", config.NOTIFIER_URL or "(unset)"),
        ("NOTIFIER_TIMEOUT_SECONDS", config.NOTIFIER_TIMEOUT_SECONDS),
        ("FIREBASE_DATABASE_URL", config.FIREBASE_DATABASE_URL or "(unset)"),
        ("FIREBASE_CREDENTIALS", config.FIREBASE_CREDENTIALS),
        ("WATCH_PATH", config.WATCH_PATH),
        ("MESSAGE_FIELD", config.MESSAGE_FIELD),
        ("SHUTDOWN_DRAIN_SECONDS", config.SHUTDOWN_DRAIN_SECONDS),
        ("LOG_FILE", config.LOG_FILE),
    ):
        table.add_row(name, str(value))
    console.print(table)

    if errors:
        for msg in errors:
            console.print(f"[red]{msg}[/red]")
        log.error("validate_config.validation_failed", errors=errors)
        raise SystemExit(1)

    console.print("[green]Config valid.[/green]")
    log.info("validate_config.ok")
