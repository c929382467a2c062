"""Say mode: write a message to the watched record, as the bot side does."""

import typer

from homerelay.config import WATCH_PATH, missing_settings
from homerelay.errors import ConfigError, StoreConnectionError

from .shared import console, get_firebase_store, logger


def say(
    text: str = typer.Argument(..., help="Message to write"),
    path: str = typer.Option(WATCH_PATH, "--path", "-p", help="Record path to write"),
) -> None:
    """Write {message, timestamp} to the record path; a running relay picks it up."""
    log = logger.bind(command="say", path=path)
    if missing_settings("FIREBASE_DATABASE_URL"):
        console.print("[red]Missing environment variables: FIREBASE_DATABASE_URL[/red]")
        log.warning("say.missing_env")
        raise typer.Exit(1)
    if not text.strip():
        console.print("[red]Message must be non-empty.[/red]")
        raise typer.Exit(1)

    try:
        store = get_firebase_store()
    except (ConfigError, StoreConnectionError):
        raise typer.Exit(1)
    try:
        record = store.set_message(path, text)
    except Exception as e:
        console.print(f"[red]Write failed: {e}[/red]")
        log.error("say.write_failed", error=str(e))
        raise typer.Exit(1) from e
    finally:
        store.close()
    console.print(f"[green]Wrote to {path}:[/green] {record}")
    log.info("say.complete", timestamp=record.get("timestamp"))
