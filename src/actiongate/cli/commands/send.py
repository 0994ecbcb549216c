"""
actiongate send - Send a message through the action router.

Usage:
    actiongate send --to TARGET --message TEXT [--provider P] [--account A]
    actiongate send --to TARGET --message TEXT --execute

Sends are dry runs unless --execute is given. Providers with a native send
route need a registered action handler to execute; the rest are delivered
through the gateway.
"""

import asyncio
from typing import Annotated, Any, Optional

import typer

from actiongate.actions.router import ActionRouter
from actiongate.cli.common import load_config_or_exit
from actiongate.cli.output import print_error, print_json, print_success, print_warning
from actiongate.exceptions import ActionRouterError
from actiongate.outbound.gateway import GatewayOutbound


def send_message(
    to: Annotated[str, typer.Option("--to", "-t", help="Target channel, chat or user.")],
    message: Annotated[str, typer.Option("--message", "-m", help="Message text.")] = "",
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="Provider to send through."),
    ] = None,
    account: Annotated[
        Optional[str],
        typer.Option("--account", "-a", help="Provider account to act as."),
    ] = None,
    media: Annotated[
        Optional[str],
        typer.Option("--media", help="Media URL or path to attach."),
    ] = None,
    execute: Annotated[
        bool,
        typer.Option("--execute", "-x", help="Actually send instead of a dry run."),
    ] = False,
) -> None:
    """Send a message (dry run by default)."""
    config = load_config_or_exit()
    router = ActionRouter(config, outbound=GatewayOutbound(config.gateway))

    params: dict[str, Any] = {"to": to, "message": message, "dryRun": not execute}
    if provider:
        params["provider"] = provider
    if account:
        params["accountId"] = account
    if media:
        params["media"] = media

    try:
        result = asyncio.run(router.execute("send", params))
    except ActionRouterError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    if execute:
        print_success(f"Sent via {result.provider}")
    else:
        print_warning(f"Dry run via {result.provider}; pass --execute to send")
    print_json(result.model_dump(mode="json", exclude_none=True))
