"""Notify mode: send one message straight to the notifier endpoint."""

import asyncio

import typer

from homerelay.config import NOTIFIER_URL, missing_settings
from homerelay.notifier import Notifier

from .shared import console, logger, print_result


async def _send_once(url: str, text: str):
    async with Notifier(url) as notifier:
        return await notifier.send(text)


def notify(
    text: str = typer.Argument(..., help="Message to speak"),
) -> None:
    """Send TEXT to the notifier once (checks the endpoint without touching Firebase)."""
    log = logger.bind(command="notify")
    if missing_settings("NOTIFIER_URL"):
        console.print("[red]Missing environment variables: NOTIFIER_URL[/red]")
        log.warning("notify.missing_env")
        raise typer.Exit(1)
    if not text.strip():
        console.print("[red]Message must be non-empty.[/red]")
        raise typer.Exit(1)

    result = asyncio.run(_send_once(NOTIFIER_URL, text))
    print_result(result)
    log.info("notify.complete", status=result.status, status_code=result.status_code)
    if not result.ok:
        raise typer.Exit(1)
