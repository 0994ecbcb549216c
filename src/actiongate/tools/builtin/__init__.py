"""Built-in tools for the actiongate agent surface."""

import logging
from typing import Optional

from actiongate.actions.router import ActionRouter
from actiongate.actions.session import SessionContext
from actiongate.tools.builtin.message import MessageTool
from actiongate.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def register_builtin_tools(
    registry: ToolRegistry,
    router: ActionRouter,
    session: Optional[SessionContext] = None,
) -> None:
    """Register all built-in tools.

    Args:
        registry: ToolRegistry to register tools in
        router: Router the message tool dispatches through
        session: Session context for reply threading. Defaults to one using
            the configured ``agent.reply_to_mode``.
    """
    config = router.config
    if session is None:
        session = SessionContext.from_config(config)
    registry.register(MessageTool(router, account_id=config.agent.account_id, session=session))
    logger.info("Registered 1 built-in tool")


__all__ = ["MessageTool", "register_builtin_tools"]
