"""
actiongate actions / schema - Inspect what the agent may do.

Usage:
    actiongate actions
    actiongate schema [--tool]
"""

from typing import Annotated

import typer
from rich.table import Table

from actiongate.actions.descriptors import get_descriptor
from actiongate.actions.router import ActionRouter
from actiongate.cli.common import load_config_or_exit
from actiongate.cli.output import console, print_json, print_warning
from actiongate.platforms.capabilities import CapabilityRegistry
from actiongate.tools.builtin.message import MessageTool


def list_actions() -> None:
    """List the actions legal under the current configuration."""
    config = load_config_or_exit()
    router = ActionRouter(config)
    registry: CapabilityRegistry = router.capabilities()
    catalog, _ = router.describe_schema()

    providers = registry.enabled_providers()
    if not providers:
        print_warning("No messaging provider is enabled; only 'send' is advertised.")

    table = Table(title="Message Actions")
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Providers")

    for name in catalog.ordered():
        descriptor = get_descriptor(name)
        eligible = [p.value for p in providers if descriptor is not None and descriptor.allows(p)]
        table.add_row(name, ", ".join(eligible) or "-")

    console.print(table)
    console.print(f"\n[dim]Total: {len(catalog)} action(s)[/dim]")


def show_schema(
    tool: Annotated[
        bool,
        typer.Option("--tool", help="Print the full tool definition instead of the schema."),
    ] = False,
) -> None:
    """Print the parameter schema advertised to the agent."""
    config = load_config_or_exit()
    router = ActionRouter(config)

    if tool:
        print_json(MessageTool(router).get_tool_definition())
        return

    _, contract = router.describe_schema()
    print_json(contract.to_json_schema())
