"""Tests for the action router."""

import asyncio
from unittest.mock import MagicMock

import pytest

from actiongate.actions.handlers import HandlerRegistry
from actiongate.actions.models import DispatchRequest, DispatchResult
from actiongate.actions.params import ParameterExtractor
from actiongate.actions.router import ActionRouter
from actiongate.actions.session import SessionContext
from actiongate.exceptions import (
    DownstreamProviderError,
    HandlerNotRegistered,
    InvalidParameterType,
    MissingRequiredParameter,
    ProviderResolutionFailure,
    UnknownAction,
    UnsupportedActionForProvider,
)
from actiongate.platforms.models import PlatformType

ALL_PROVIDER_CONFIG = {
    "discord": {"enable": True, "bot_token": "d"},
    "slack": {"enable": True, "bot_token": "s"},
    "telegram": {"enable": True, "bot_token": "t"},
    "whatsapp": {"enable": True, "access_token": "w"},
    "teams": {"enable": True, "app_id": "a", "app_password": "p", "tenant_id": "t"},
    "signal": {"enable": True, "phone_number": "+1555"},
    "imessage": {"enable": True},
}


def _handlers(recording_handler, *providers):
    return {provider: recording_handler for provider in providers}


# =============================================================================
# Phase ordering and validation
# =============================================================================


class TestRouterValidation:
    """Errors are raised before any collaborator is called."""

    @pytest.mark.asyncio
    async def test_unknown_action(self, make_config, recording_handler, recording_outbound):
        """Unknown actions fail before provider resolution."""
        router = ActionRouter(make_config(), {}, recording_outbound, env={})

        with pytest.raises(UnknownAction) as exc_info:
            await router.execute("teleport", {})

        assert exc_info.value.name == "teleport"
        assert recording_outbound.call_count == 0

    @pytest.mark.asyncio
    async def test_provider_resolution_failure(self, multi_config, recording_outbound):
        router = ActionRouter(multi_config, {}, recording_outbound, env={})

        with pytest.raises(ProviderResolutionFailure):
            await router.execute("send", {"to": "x", "message": "hi"})
        assert recording_outbound.call_count == 0

    @pytest.mark.asyncio
    async def test_react_without_message_id(
        self, discord_config, recording_handler, recording_outbound
    ):
        router = ActionRouter(
            discord_config,
            _handlers(recording_handler, PlatformType.DISCORD),
            recording_outbound,
            env={},
        )

        with pytest.raises(MissingRequiredParameter) as exc_info:
            await router.execute("react", {"emoji": "✅", "to": "channel:1"})

        assert exc_info.value.key == "messageId"
        assert recording_handler.calls == []
        assert recording_outbound.call_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", ["slack", "telegram", "whatsapp", "signal"])
    async def test_permissions_unsupported_before_extraction(
        self, make_config, recording_handler, recording_outbound, provider
    ):
        """Eligibility is checked before any parameter is read."""
        extractor = MagicMock(spec=ParameterExtractor)
        router = ActionRouter(
            make_config(**ALL_PROVIDER_CONFIG),
            _handlers(recording_handler, *PlatformType),
            recording_outbound,
            extractor=extractor,
            env={},
        )

        with pytest.raises(UnsupportedActionForProvider) as exc_info:
            await router.execute("permissions", {"provider": provider})

        assert exc_info.value.action == "permissions"
        assert exc_info.value.provider == provider
        extractor.extract.assert_not_called()
        assert recording_handler.calls == []

    @pytest.mark.asyncio
    async def test_invalid_parameter_type(self, discord_config, recording_handler):
        router = ActionRouter(
            discord_config, _handlers(recording_handler, PlatformType.DISCORD), env={}
        )

        with pytest.raises(InvalidParameterType) as exc_info:
            await router.execute("read", {"to": "channel:1", "limit": "lots"})

        assert exc_info.value.key == "limit"
        assert recording_handler.calls == []

    @pytest.mark.asyncio
    async def test_handler_not_registered(self, discord_config, recording_outbound):
        router = ActionRouter(discord_config, {}, recording_outbound, env={})

        with pytest.raises(HandlerNotRegistered) as exc_info:
            await router.execute("pin", {"to": "channel:1", "messageId": "9"})

        assert exc_info.value.provider == "discord"
        assert recording_outbound.call_count == 0


# =============================================================================
# Dry run
# =============================================================================


class TestRouterDryRun:
    """Dry runs never reach a provider handler."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", [p.value for p in PlatformType])
    async def test_dry_run_send_uses_outbound(
        self, make_config, recording_handler, recording_outbound, provider
    ):
        router = ActionRouter(
            make_config(**ALL_PROVIDER_CONFIG),
            _handlers(recording_handler, *PlatformType),
            recording_outbound,
            env={},
        )

        result = await router.execute(
            "send",
            {"provider": provider, "to": "target", "message": "hi", "dryRun": True},
        )

        assert recording_handler.calls == []
        assert len(recording_outbound.messages) == 1
        sent = recording_outbound.messages[0]
        assert sent.dry_run is True
        assert sent.provider == provider
        assert sent.content == "hi"
        assert result.ok
        assert result.provider == provider
        assert result.data["dry_run"] is True

    @pytest.mark.asyncio
    async def test_dry_run_poll_uses_outbound(
        self, discord_config, recording_handler, recording_outbound
    ):
        router = ActionRouter(
            discord_config,
            _handlers(recording_handler, PlatformType.DISCORD),
            recording_outbound,
            env={},
        )

        await router.execute(
            "poll",
            {
                "to": "channel:1",
                "pollQuestion": "Lunch?",
                "pollOption": ["Pizza", "Sushi", "Tacos"],
                "pollMulti": True,
                "dryRun": True,
            },
        )

        assert recording_handler.calls == []
        poll = recording_outbound.polls[0]
        assert poll.max_selections == 3
        assert poll.options == ["Pizza", "Sushi", "Tacos"]
        assert poll.dry_run is True

    @pytest.mark.asyncio
    async def test_dry_run_other_action_previews(
        self, discord_config, recording_handler, recording_outbound
    ):
        router = ActionRouter(
            discord_config,
            _handlers(recording_handler, PlatformType.DISCORD),
            recording_outbound,
            env={},
        )

        result = await router.execute(
            "react", {"to": "channel:1", "messageId": "9", "emoji": "✅", "dryRun": True}
        )

        assert recording_handler.calls == []
        assert recording_outbound.call_count == 0
        assert result.data == {
            "dryRun": True,
            "request": {
                "action": "react",
                "channelId": "channel:1",
                "messageId": "9",
                "emoji": "✅",
                "accountId": "default",
            },
        }

    @pytest.mark.asyncio
    async def test_dry_run_still_validates(self, discord_config, recording_outbound):
        router = ActionRouter(discord_config, {}, recording_outbound, env={})

        with pytest.raises(MissingRequiredParameter):
            await router.execute("send", {"message": "hi", "dryRun": True})
        assert recording_outbound.call_count == 0


# =============================================================================
# Dispatch
# =============================================================================


class TestRouterDispatch:
    """Tests for routed and fallback dispatch."""

    @pytest.mark.asyncio
    async def test_routes_to_provider_handler(self, discord_config, recording_handler):
        router = ActionRouter(
            discord_config, _handlers(recording_handler, PlatformType.DISCORD), env={}
        )

        result = await router.execute(
            "read", {"to": "channel:1", "limit": "20", "around": "5"}
        )

        request, config, session = recording_handler.calls[0]
        assert request.provider == PlatformType.DISCORD
        assert request.action == "readMessages"
        assert request.fields == {"channelId": "channel:1", "limit": 20, "around": "5"}
        assert request.account_id == "default"
        assert config is discord_config
        assert session is None
        assert result == DispatchResult(action="read", provider="discord", data={"ok": True})

    @pytest.mark.asyncio
    async def test_slack_ignores_discord_only_params(self, slack_config, recording_handler):
        router = ActionRouter(
            slack_config, _handlers(recording_handler, PlatformType.SLACK), env={}
        )

        await router.execute("read", {"channelId": "C1", "around": "5"})

        assert recording_handler.requests[0].fields == {"channelId": "C1"}

    @pytest.mark.asyncio
    async def test_handler_dispatch_result_passes_through(
        self, discord_config, recording_handler, dispatch_result
    ):
        recording_handler.result = dispatch_result
        router = ActionRouter(
            discord_config, _handlers(recording_handler, PlatformType.DISCORD), env={}
        )

        result = await router.execute("send", {"to": "channel:1", "message": "hi"})

        assert result.data == {"messageId": "123"}
        assert result.action == "send"
        assert result.provider == "discord"

    @pytest.mark.asyncio
    async def test_send_without_route_uses_outbound(self, make_config, recording_outbound):
        config = make_config(signal={"enable": True, "phone_number": "+1555"})
        router = ActionRouter(config, {}, recording_outbound, env={})

        result = await router.execute(
            "send", {"to": "+1666", "message": "", "media": " https://x/a.png ", "gifPlayback": True}
        )

        sent = recording_outbound.messages[0]
        assert sent.content == ""
        assert sent.media_url == " https://x/a.png "
        assert sent.gif_playback is True
        assert sent.dry_run is False
        assert sent.account_id == "default"
        assert result.data["id"] == "m-1"

    @pytest.mark.asyncio
    async def test_single_choice_poll(self, make_config, recording_outbound):
        config = make_config(whatsapp={"enable": True, "access_token": "w"})
        router = ActionRouter(config, {}, recording_outbound, env={})

        await router.execute(
            "poll", {"to": "123@g.us", "pollQuestion": "Q", "pollOption": ["a", "b"]}
        )

        assert recording_outbound.polls[0].max_selections == 1

    @pytest.mark.asyncio
    async def test_multi_choice_poll_minimum_two(self, make_config, recording_outbound):
        config = make_config(whatsapp={"enable": True, "access_token": "w"})
        router = ActionRouter(config, {}, recording_outbound, env={})

        await router.execute(
            "poll",
            {"to": "123@g.us", "pollQuestion": "Q", "pollOption": "only", "pollMulti": True},
        )

        assert recording_outbound.polls[0].max_selections == 2

    @pytest.mark.asyncio
    async def test_telegram_react_uses_chat_fallback(self, make_config, recording_handler):
        config = make_config(telegram={"enable": True, "bot_token": "t"})
        router = ActionRouter(config, _handlers(recording_handler, PlatformType.TELEGRAM), env={})

        await router.execute("react", {"to": "-100123", "messageId": "7", "emoji": "👍"})

        assert recording_handler.requests[0].fields == {
            "chatId": "-100123",
            "messageId": "7",
            "emoji": "👍",
        }

    @pytest.mark.asyncio
    async def test_agent_default_account(self, make_config, recording_handler):
        config = make_config(
            discord={"enable": True, "accounts": {"a": {"bot_token": "1"}, "b": {"bot_token": "2"}}}
        )
        config.agent.account_id = "B"
        router = ActionRouter(config, _handlers(recording_handler, PlatformType.DISCORD), env={})

        await router.execute("pin", {"to": "channel:1", "messageId": "9"})

        assert recording_handler.requests[0].account_id == "b"

    @pytest.mark.asyncio
    async def test_dispatch_request(self, discord_config, recording_handler):
        router = ActionRouter(
            discord_config, HandlerRegistry({PlatformType.DISCORD: recording_handler}), env={}
        )
        request = DispatchRequest.from_params(
            {"action": "list-pins", "channelId": "channel:1"}
        )

        result = await router.dispatch(request)

        assert recording_handler.requests[0].action == "listPins"
        assert result.action == "list-pins"

    @pytest.mark.asyncio
    async def test_config_reread_per_call(self, make_config, recording_handler):
        """Capability changes are seen on the next call."""
        config = make_config(discord={"enable": True, "bot_token": "t"})
        router = ActionRouter(config, _handlers(recording_handler, PlatformType.DISCORD), env={})

        await router.execute("pin", {"to": "channel:1", "messageId": "9"})
        config.platforms.discord.enable = False

        with pytest.raises(ProviderResolutionFailure):
            await router.execute("pin", {"to": "channel:1", "messageId": "9"})


# =============================================================================
# Downstream failures
# =============================================================================


class TestRouterDownstreamErrors:
    """Collaborator failures are wrapped once."""

    @pytest.mark.asyncio
    async def test_handler_error_wrapped(self, discord_config, recording_handler):
        cause = RuntimeError("rate limited")
        recording_handler.error = cause
        router = ActionRouter(
            discord_config, _handlers(recording_handler, PlatformType.DISCORD), env={}
        )

        with pytest.raises(DownstreamProviderError) as exc_info:
            await router.execute("pin", {"to": "channel:1", "messageId": "9"})

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.provider == "discord"
        assert "rate limited" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_outbound_error_wrapped(self, make_config, recording_outbound):
        cause = TimeoutError("gateway timed out")
        recording_outbound.error = cause
        config = make_config(signal={"enable": True, "phone_number": "+1555"})
        router = ActionRouter(config, {}, recording_outbound, env={})

        with pytest.raises(DownstreamProviderError) as exc_info:
            await router.execute("send", {"to": "+1666", "message": "hi"})

        assert exc_info.value.cause is cause
        assert exc_info.value.provider == "signal"

    @pytest.mark.asyncio
    async def test_router_errors_from_handler_pass_through(
        self, discord_config, recording_handler
    ):
        recording_handler.error = MissingRequiredParameter("emoji")
        router = ActionRouter(
            discord_config, _handlers(recording_handler, PlatformType.DISCORD), env={}
        )

        with pytest.raises(MissingRequiredParameter):
            await router.execute("react", {"to": "channel:1", "messageId": "9"})

    @pytest.mark.asyncio
    async def test_cancellation_not_wrapped(self, discord_config, recording_handler):
        recording_handler.error = asyncio.CancelledError()
        router = ActionRouter(
            discord_config, _handlers(recording_handler, PlatformType.DISCORD), env={}
        )

        with pytest.raises(asyncio.CancelledError):
            await router.execute("pin", {"to": "channel:1", "messageId": "9"})


# =============================================================================
# Slack reply threading
# =============================================================================


class TestSlackAutoThreading:
    """Slack sends thread into the current conversation thread."""

    @pytest.fixture
    def router(self, slack_config, recording_handler):
        return ActionRouter(slack_config, _handlers(recording_handler, PlatformType.SLACK), env={})

    @pytest.mark.asyncio
    async def test_first_mode_threads_once(self, router, recording_handler):
        session = SessionContext(
            current_channel_id="C123", current_thread_ts="171.5", reply_to_mode="first"
        )

        await router.execute("send", {"to": "channel:C123", "message": "one"}, session=session)
        await router.execute("send", {"to": "channel:C123", "message": "two"}, session=session)

        first, second = recording_handler.requests
        assert first.fields["threadTs"] == "171.5"
        assert "threadTs" not in second.fields
        assert session.has_replied.value is True

    @pytest.mark.asyncio
    async def test_all_mode_threads_every_reply(self, router, recording_handler):
        session = SessionContext(
            current_channel_id="C123", current_thread_ts="171.5", reply_to_mode="all"
        )

        await router.execute("send", {"to": "#c123", "message": "one"}, session=session)
        await router.execute("send", {"to": "C123", "message": "two"}, session=session)

        assert [r.fields["threadTs"] for r in recording_handler.requests] == ["171.5", "171.5"]

    @pytest.mark.asyncio
    async def test_other_channel_not_threaded(self, router, recording_handler):
        session = SessionContext(
            current_channel_id="C123", current_thread_ts="171.5", reply_to_mode="all"
        )

        await router.execute("send", {"to": "C999", "message": "hi"}, session=session)

        assert "threadTs" not in recording_handler.requests[0].fields
        assert session.has_replied.value is False

    @pytest.mark.asyncio
    async def test_explicit_thread_wins(self, router, recording_handler):
        session = SessionContext(
            current_channel_id="C123", current_thread_ts="171.5", reply_to_mode="all"
        )

        await router.execute(
            "send", {"to": "C123", "message": "hi", "threadId": "99.1"}, session=session
        )

        assert recording_handler.requests[0].fields["threadTs"] == "99.1"

    @pytest.mark.asyncio
    async def test_failed_send_does_not_mark_replied(self, router, recording_handler):
        recording_handler.error = RuntimeError("boom")
        session = SessionContext(
            current_channel_id="C123", current_thread_ts="171.5", reply_to_mode="first"
        )

        with pytest.raises(DownstreamProviderError):
            await router.execute("send", {"to": "C123", "message": "hi"}, session=session)

        assert session.has_replied.value is False

    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, router, recording_handler):
        a = SessionContext(current_channel_id="C1", current_thread_ts="1.1", reply_to_mode="first")
        b = SessionContext(current_channel_id="C1", current_thread_ts="1.1", reply_to_mode="first")

        await router.execute("send", {"to": "C1", "message": "a"}, session=a)
        await router.execute("send", {"to": "C1", "message": "b"}, session=b)

        assert [r.fields.get("threadTs") for r in recording_handler.requests] == ["1.1", "1.1"]
