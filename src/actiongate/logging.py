"""Logging configuration for actiongate entry points.

Library modules only create ``logging.getLogger(__name__)`` loggers; the CLI
calls configure_logging() once at startup.

Logging Levels:
- DEBUG: Catalog and schema computation, gateway requests
- INFO: Registrations and dispatches
- WARNING: No usable provider, failed tool calls
- ERROR: Collaborator failures
"""

import logging
import os

LOG_LEVEL_ENV = "ACTIONGATE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_log_level(level: str | None = None) -> int:
    """Resolve a level name, falling back to ACTIONGATE_LOG_LEVEL then WARNING."""
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    if name not in _LEVELS:
        name = DEFAULT_LOG_LEVEL
    return getattr(logging, name)


def configure_logging(level: str | None = None, use_rich: bool = True) -> None:
    """Configure root logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses ACTIONGATE_LOG_LEVEL or WARNING.
        use_rich: Use Rich handler on stderr instead of a plain stream handler.
    """
    log_level = resolve_log_level(level)

    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
