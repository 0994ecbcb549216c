"""Tests for the tool base class, the tool registry and the message tool."""

import json

import pytest

from actiongate.actions.router import ActionRouter
from actiongate.actions.session import SessionContext
from actiongate.config import Config
from actiongate.platforms.models import PlatformType
from actiongate.tools.base import Tool
from actiongate.tools.builtin import MessageTool, register_builtin_tools
from actiongate.tools.models import ToolParameter, ToolResult
from actiongate.tools.registry import ToolRegistry, get_tool_registry, reset_tool_registry


class EchoTool(Tool):
    """Simple tool for testing."""

    @property
    def name(self) -> str:
        return "echo"

    @property
    def description(self) -> str:
        return "Echo the input"

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="text", type="string", description="Text", required=True),
            ToolParameter(
                name="tags",
                type="array",
                description="Tags",
                required=False,
                items={"type": "string"},
            ),
        ]

    async def execute(self, **kwargs) -> ToolResult:
        return ToolResult(tool_call_id=kwargs.get("tool_call_id", "unknown"), output=kwargs["text"])


# =============================================================================
# Base and registry
# =============================================================================


class TestToolBase:
    """Tests for the Tool base class."""

    def test_input_schema(self):
        schema = EchoTool().get_input_schema()
        assert schema["required"] == ["text"]
        assert schema["properties"]["tags"] == {
            "type": "array",
            "description": "Tags",
            "items": {"type": "string"},
        }

    def test_tool_definition(self):
        definition = EchoTool().get_tool_definition()
        assert definition["name"] == "echo"
        assert definition["input_schema"]["type"] == "object"

    def test_validate_input(self):
        tool = EchoTool()
        tool.validate_input(text="hi", tool_call_id="1")

        with pytest.raises(ValueError, match="Missing required parameters: text"):
            tool.validate_input()
        with pytest.raises(ValueError, match="Unknown parameters: bogus"):
            tool.validate_input(text="hi", bogus=1)


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_register(self):
        registry = ToolRegistry()
        tool = EchoTool()
        registry.register(tool)

        assert len(registry) == 1
        assert "echo" in registry
        assert registry.get("echo") is tool
        assert registry.list_tool_names() == ["echo"]

    def test_register_duplicate_fails(self):
        registry = ToolRegistry()
        registry.register(EchoTool())
        with pytest.raises(ValueError, match="already registered"):
            registry.register(EchoTool())

    def test_unregister(self):
        registry = ToolRegistry()
        registry.register(EchoTool())
        assert registry.unregister("echo") is True
        assert registry.unregister("echo") is False

    def test_global_registry(self):
        reset_tool_registry()
        registry = get_tool_registry()
        assert get_tool_registry() is registry
        reset_tool_registry()
        assert get_tool_registry() is not registry
        reset_tool_registry()


# =============================================================================
# Message tool
# =============================================================================


@pytest.fixture
def discord_router(discord_config, recording_handler, recording_outbound) -> ActionRouter:
    return ActionRouter(
        discord_config,
        {PlatformType.DISCORD: recording_handler},
        recording_outbound,
        env={},
    )


class TestMessageTool:
    """Tests for MessageTool."""

    def test_definition(self, discord_router):
        tool = MessageTool(discord_router)

        assert tool.name == "message"
        assert tool.is_dangerous
        names = [p.name for p in tool.parameters]
        assert names[:3] == ["action", "to", "message"]
        assert "react" in tool.parameters[0].enum

    def test_schema_tracks_capabilities(self, make_config):
        router = ActionRouter(make_config(), env={})
        schema = MessageTool(router).get_input_schema()
        assert schema["properties"]["action"]["enum"] == ["send"]
        assert schema["required"] == ["action", "to", "message"]

    def test_variant_schema(self, discord_router):
        schema = MessageTool(discord_router).get_input_schema()
        assert [variant["required"] for variant in schema["anyOf"]] == [
            ["action", "to", "message"],
            ["action"],
        ]

    @pytest.mark.asyncio
    async def test_execute(self, discord_router, recording_handler):
        tool = MessageTool(discord_router)

        result = await tool.execute(
            tool_call_id="call-1", action="pin", to="channel:1", messageId="9"
        )

        assert not result.is_error
        assert result.tool_call_id == "call-1"
        output = json.loads(result.output)
        assert output["action"] == "pin"
        assert output["provider"] == "discord"
        assert recording_handler.requests[0].action == "pinMessage"

    @pytest.mark.asyncio
    async def test_router_error_becomes_error_result(self, discord_router, recording_handler):
        tool = MessageTool(discord_router)

        result = await tool.execute(tool_call_id="call-2", action="react", to="channel:1")

        assert result.is_error
        assert result.error == "messageId required"
        assert recording_handler.calls == []

    @pytest.mark.asyncio
    async def test_downstream_error_message_verbatim(self, discord_router, recording_handler):
        recording_handler.error = RuntimeError("Missing Permissions")
        tool = MessageTool(discord_router)

        result = await tool.execute(action="pin", to="channel:1", messageId="9")

        assert result.is_error
        assert result.error == "Missing Permissions"
        assert result.tool_call_id == "unknown"

    @pytest.mark.asyncio
    async def test_missing_action(self, discord_router):
        result = await MessageTool(discord_router).execute(to="channel:1")
        assert result.is_error
        assert "action" in result.error

    @pytest.mark.asyncio
    async def test_unadvertised_parameter_rejected(self, discord_router, recording_handler):
        result = await MessageTool(discord_router).execute(
            action="send", to="channel:1", message="hi", buttons=[]
        )
        assert result.is_error
        assert "buttons" in result.error
        assert recording_handler.calls == []

    @pytest.mark.asyncio
    async def test_agent_account(self, make_config, recording_handler):
        config = make_config(
            discord={"enable": True, "accounts": {"a": {"bot_token": "1"}, "b": {"bot_token": "2"}}}
        )
        router = ActionRouter(config, {PlatformType.DISCORD: recording_handler}, env={})

        await MessageTool(router, account_id=" b ").execute(
            action="pin", to="channel:1", messageId="9"
        )
        await MessageTool(router, account_id="b").execute(
            action="pin", to="channel:1", messageId="9", accountId="a"
        )

        assert [r.account_id for r in recording_handler.requests] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_session_threading(self, slack_config, recording_handler):
        router = ActionRouter(slack_config, {PlatformType.SLACK: recording_handler}, env={})
        session = SessionContext(
            current_channel_id="C1", current_thread_ts="5.5", reply_to_mode="first"
        )
        tool = MessageTool(router, session=session)

        await tool.execute(action="send", to="C1", message="hi")

        assert recording_handler.requests[0].fields["threadTs"] == "5.5"
        assert session.has_replied.value is True

    def test_register_builtin_tools(self, discord_router):
        registry = ToolRegistry()
        register_builtin_tools(registry, discord_router)

        assert registry.list_tool_names() == ["message"]
        definitions = registry.get_tool_definitions()
        assert definitions[0]["name"] == "message"

    def test_register_builtin_tools_uses_reply_mode(self, recording_handler):
        config = Config.model_validate(
            {
                "platforms": {"slack": {"enable": True, "bot_token": "xoxb"}},
                "agent": {"reply_to_mode": "all"},
            }
        )
        router = ActionRouter(config, {PlatformType.SLACK: recording_handler}, env={})
        registry = ToolRegistry()

        register_builtin_tools(registry, router)

        assert registry.get("message").session.reply_to_mode == "all"

    def test_register_builtin_tools_keeps_session(self, discord_router):
        session = SessionContext(reply_to_mode="first")
        registry = ToolRegistry()

        register_builtin_tools(registry, discord_router, session=session)

        assert registry.get("message").session is session

    @pytest.mark.asyncio
    async def test_configured_reply_mode_threads(self, recording_handler):
        config = Config.model_validate(
            {
                "platforms": {"slack": {"enable": True, "bot_token": "xoxb"}},
                "agent": {"reply_to_mode": "first"},
            }
        )
        router = ActionRouter(config, {PlatformType.SLACK: recording_handler}, env={})
        session = SessionContext.from_config(
            config, current_channel_id="C1", current_thread_ts="7.7"
        )
        tool = MessageTool(router, session=session)

        await tool.execute(action="send", to="C1", message="one")
        await tool.execute(action="send", to="C1", message="two")

        assert recording_handler.requests[0].fields["threadTs"] == "7.7"
        assert "threadTs" not in recording_handler.requests[1].fields
