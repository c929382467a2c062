"""Run mode: watch the record in Firebase and relay messages until interrupted."""

import asyncio
import signal

import typer

from homerelay.config import NOTIFIER_URL, SHUTDOWN_DRAIN_SECONDS, WATCH_PATH, missing_settings
from homerelay.errors import ConfigError, StoreConnectionError
from homerelay.notifier import Notifier
from homerelay.relay.runner import run_relay
from homerelay.utils.logger import bind_context, clear_context

from .shared import console, get_firebase_store, logger


async def _serve(store, path: str, drain_seconds: float) -> dict:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)
    async with Notifier(NOTIFIER_URL) as notifier:
        return await run_relay(store, notifier, path, stop_event, drain_seconds=drain_seconds)


def run(
    path: str = typer.Option(WATCH_PATH, "--path", "-p", help="Record path to watch"),
    drain_seconds: float = typer.Option(
        SHUTDOWN_DRAIN_SECONDS,
        "--drain-seconds",
        help="Seconds to wait for in-flight notifications on shutdown",
    ),
) -> None:
    """Watch a record path and relay its message field to the Google Home notifier."""
    log = logger.bind(command="run", path=path)
    log.info("run.start")

    missing = missing_settings()
    if missing:
        console.print(f"[red]Missing environment variables: {', '.join(missing)}[/red]")
        log.warning("run.missing_env", missing=missing)
        raise typer.Exit(1)

    try:
        store = get_firebase_store()
    except (ConfigError, StoreConnectionError):
        raise typer.Exit(1)

    console.print(f"[green]Watching {path} -> {NOTIFIER_URL}[/green]")
    console.print("[green]Press Ctrl+C to stop.[/green]")
    bind_context(command="run", path=path)
    try:
        stats = asyncio.run(_serve(store, path, drain_seconds))
    finally:
        store.close()
        clear_context()
    console.print(
        f"[dim]Stopped. {stats['relayed']} relayed, {stats['skipped']} skipped, {stats['errors']} errors.[/dim]"
    )
    log.info("run.complete", **stats)
