"""Helpers shared by CLI commands."""

import typer

from actiongate.cli.output import print_error
from actiongate.config import Config, ConfigurationError, get_config


def load_config_or_exit() -> Config:
    """Load configuration, exiting with status 1 when it is invalid."""
    try:
        return get_config()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
