"""
Main Typer application for the actiongate CLI.

This module defines the root CLI application and registers all commands.
"""

from typing import Annotated

import typer

from actiongate import __version__
from actiongate.cli.commands import accounts, catalog, send
from actiongate.cli.output import print_info
from actiongate.logging import configure_logging

app = typer.Typer(
    name="actiongate",
    help="Capability-gated message actions for AI agents.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"actiongate version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level: DEBUG, INFO, WARNING or ERROR.",
        ),
    ] = None,
) -> None:
    """
    [bold blue]actiongate[/bold blue] - message action router

    Shows which message actions the agent may perform under the current
    configuration and dispatches them to the right provider.
    """
    configure_logging(log_level)


app.command("actions")(catalog.list_actions)
app.command("schema")(catalog.show_schema)
app.command("accounts")(accounts.list_accounts)
app.command("send")(send.send_message)


if __name__ == "__main__":
    app()
