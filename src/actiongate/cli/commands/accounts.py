"""
actiongate accounts - Show resolved provider accounts.

Usage:
    actiongate accounts [--provider PROVIDER]
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from actiongate.cli.common import load_config_or_exit
from actiongate.cli.output import console, print_error, print_warning
from actiongate.platforms.capabilities import CapabilityRegistry
from actiongate.platforms.models import parse_platform


def list_accounts(
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="Only show accounts of this provider."),
    ] = None,
) -> None:
    """List every configured account with its credential source and gates."""
    config = load_config_or_exit()
    registry = CapabilityRegistry.from_config(config)

    platform = None
    if provider is not None:
        platform = parse_platform(provider)
        if platform is None:
            print_error(f"Unknown provider: {provider}")
            raise typer.Exit(1)

    accounts = registry.accounts(platform)
    if not accounts:
        print_warning("No accounts configured.")
        return

    table = Table(title="Provider Accounts")
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Account", style="magenta")
    table.add_column("Status")
    table.add_column("Credentials")
    table.add_column("Gates")

    for account in accounts:
        if account.usable:
            status = "[green]usable[/green]"
        elif account.enabled:
            status = "[yellow]no credentials[/yellow]"
        else:
            status = "[dim]disabled[/dim]"
        gates = ", ".join(
            f"{key}={'on' if allowed else 'off'}" for key, allowed in sorted(account.gates.items())
        )
        table.add_row(
            account.provider.value,
            account.id,
            status,
            account.credential_source,
            gates or "-",
        )

    console.print(table)
