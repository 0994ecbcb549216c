"""
Message tool: the single messaging operation offered to the agent.

Sends messages and runs provider actions (reactions, pins, threads,
moderation, ...) across every configured messaging provider.
"""

import json
import logging
from typing import Any, Optional

from actiongate.actions.router import ActionRouter
from actiongate.actions.schema import TARGET_FIELDS, ParameterContract
from actiongate.actions.session import SessionContext
from actiongate.exceptions import ActionRouterError
from actiongate.tools.base import Tool
from actiongate.tools.models import ToolParameter, ToolResult

logger = logging.getLogger(__name__)


class MessageTool(Tool):
    """Send messages and provider-specific actions through the action router."""

    def __init__(
        self,
        router: ActionRouter,
        account_id: Optional[str] = None,
        session: Optional[SessionContext] = None,
    ):
        """Initialize message tool.

        Args:
            router: Router every call is dispatched through
            account_id: Account the agent acts as when a call names none
            session: Session context used for reply threading
        """
        self._router = router
        self._account_id = account_id.strip() if account_id and account_id.strip() else None
        self._session = session
        super().__init__()

    @property
    def name(self) -> str:
        """Tool name."""
        return "message"

    @property
    def description(self) -> str:
        """Tool description."""
        return (
            "Send messages and provider-specific actions "
            "(Discord/Slack/Telegram/WhatsApp/Signal/iMessage/MS Teams)."
        )

    def _contract(self) -> tuple[list[str], ParameterContract]:
        catalog, contract = self._router.describe_schema()
        return catalog.ordered(), contract

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters, derived from the live capability snapshot."""
        actions, contract = self._contract()
        return [
            ToolParameter(
                name="action",
                type="string",
                description="Action to perform",
                required=True,
                enum=actions,
            ),
            *TARGET_FIELDS,
            *contract.fields,
        ]

    @property
    def session(self) -> Optional[SessionContext]:
        """Session context used for reply threading."""
        return self._session

    @property
    def is_dangerous(self) -> bool:
        """Messaging acts on external services."""
        return True

    def get_input_schema(self) -> dict[str, Any]:
        """Variant schema: "send" requires a target and a body."""
        _, contract = self._contract()
        return contract.to_json_schema()

    async def execute(self, **kwargs: Any) -> ToolResult:
        """Dispatch one message action."""
        tool_call_id: str = kwargs.pop("tool_call_id", "unknown")

        try:
            self.validate_input(**kwargs)
        except ValueError as e:
            return ToolResult(tool_call_id=tool_call_id, output="", error=str(e), is_error=True)

        params = dict(kwargs)
        action = params.pop("action")
        if self._account_id and not params.get("accountId"):
            params["accountId"] = self._account_id

        try:
            result = await self._router.execute(action, params, session=self._session)
        except ActionRouterError as e:
            logger.warning(f"Message action '{action}' failed: {e}")
            return ToolResult(tool_call_id=tool_call_id, output="", error=str(e), is_error=True)

        return ToolResult(
            tool_call_id=tool_call_id,
            output=json.dumps(result.model_dump(mode="json"), indent=2, default=str),
        )
