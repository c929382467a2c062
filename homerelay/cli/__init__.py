"""CLI commands: one module per mode (run, notify, say, validate-config)."""

from typer import Typer

from homerelay.cli import notify_mode, run_mode, say_mode, validate_config as validate_config_module

app = Typer(help="Relay Firebase messages to a Google Home notifier")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(run_mode.run)
    app.command()(notify_mode.notify)
    app.command()(say_mode.say)
    app.command(name="validate-config")(validate_config_module.validate_config)


register_commands()
