"""
actiongate - capability-gated message action router

Exposes a single "message" operation to an automated agent and routes each
invocation to whichever messaging provider (Discord, Slack, Telegram,
WhatsApp, Teams, ...) is configured and allowed to perform it.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("actiongate")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "__version__",
]
