"""CLI command modules."""

from actiongate.cli.commands import accounts, catalog, send

__all__ = ["accounts", "catalog", "send"]
