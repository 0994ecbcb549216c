"""Static action table and the provider × action dispatch routes.

Descriptors say which parameters an action reads and which providers may
perform it. Routes say how the extracted values are projected into a
provider's native request. Neither depends on account state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

from actiongate.actions.params import ParamSpec
from actiongate.platforms.models import PlatformType

DISCORD = PlatformType.DISCORD
SLACK = PlatformType.SLACK
TELEGRAM = PlatformType.TELEGRAM
WHATSAPP = PlatformType.WHATSAPP

DISCORD_ONLY = frozenset({DISCORD})
DISCORD_SLACK = frozenset({DISCORD, SLACK})

FallbackPath = Literal["send_message", "send_poll"]

# Canonical action order, used wherever a deterministic listing is needed.
ALL_ACTIONS: tuple[str, ...] = (
    "send",
    "poll",
    "react",
    "reactions",
    "read",
    "edit",
    "delete",
    "pin",
    "unpin",
    "list-pins",
    "permissions",
    "thread-create",
    "thread-list",
    "thread-reply",
    "search",
    "sticker",
    "member-info",
    "role-info",
    "emoji-list",
    "emoji-upload",
    "sticker-upload",
    "role-add",
    "role-remove",
    "channel-info",
    "channel-list",
    "voice-status",
    "event-list",
    "event-create",
    "timeout",
    "kick",
    "ban",
)


@dataclass(frozen=True)
class ActionDescriptor:
    """Static metadata for one action."""

    name: str
    params: tuple[ParamSpec, ...] = ()
    providers: Union[frozenset[PlatformType], Literal["any"]] = "any"
    fallback: Optional[FallbackPath] = None

    def allows(self, provider: PlatformType) -> bool:
        """Whether the provider may perform this action."""
        return self.providers == "any" or provider in self.providers

    def params_for(self, provider: PlatformType) -> tuple[ParamSpec, ...]:
        """Parameter specs read for a provider, in extraction order."""
        return tuple(spec for spec in self.params if spec.applies_to(provider))

    def required_params(self, provider: PlatformType) -> set[str]:
        """Names that must be present for a provider.

        A spec with a fallback is satisfied by either key and is reported
        under its own name.
        """
        return {spec.name for spec in self.params_for(provider) if spec.required}

    def optional_params(self, provider: PlatformType) -> set[str]:
        """Names that may be present for a provider."""
        return {spec.name for spec in self.params_for(provider) if not spec.required}


FieldSource = Union[str, tuple[str, ...]]


@dataclass(frozen=True)
class Route:
    """Projection of extracted values into one provider-native request.

    ``fields`` maps a native field to the extracted parameter feeding it;
    a tuple of parameters takes the first value that is not None.
    """

    native_action: str
    fields: Mapping[str, FieldSource] = field(default_factory=dict)

    def build_fields(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Project extracted values, dropping fields with no value."""
        built: dict[str, Any] = {}
        for target, source in self.fields.items():
            sources = (source,) if isinstance(source, str) else source
            value = next((values[name] for name in sources if values.get(name) is not None), None)
            if value is not None:
                built[target] = value
        return built


# =============================================================================
# Parameter specs
# =============================================================================

TO = ParamSpec("to", required=True)
MESSAGE_ID = ParamSpec("messageId", required=True)
GUILD_ID = ParamSpec("guildId", required=True)
USER_ID = ParamSpec("userId", required=True)
LIMIT = ParamSpec("limit", kind="integer")
CHANNEL = ParamSpec("channelId", required=True, fallback="to", providers=DISCORD_SLACK)
MEDIA = ParamSpec("media", trim=False)
MEDIA_REQUIRED = ParamSpec("media", required=True, trim=False)


def _descriptor(
    name: str,
    *params: ParamSpec,
    providers: Union[frozenset[PlatformType], Literal["any"]] = DISCORD_ONLY,
    fallback: Optional[FallbackPath] = None,
) -> ActionDescriptor:
    return ActionDescriptor(name=name, params=params, providers=providers, fallback=fallback)


_MODERATION_PARAMS = (
    GUILD_ID,
    USER_ID,
    ParamSpec("durationMin", kind="integer"),
    ParamSpec("until"),
    ParamSpec("reason"),
    ParamSpec("deleteDays", kind="integer"),
)

_DESCRIPTORS: tuple[ActionDescriptor, ...] = (
    _descriptor(
        "send",
        TO,
        ParamSpec("message", required=True, allow_empty=True),
        MEDIA,
        ParamSpec("replyTo"),
        ParamSpec("threadId"),
        ParamSpec("buttons", kind="buttons", providers=frozenset({TELEGRAM})),
        ParamSpec("gifPlayback", kind="boolean"),
        ParamSpec("bestEffort", kind="boolean"),
        providers="any",
        fallback="send_message",
    ),
    _descriptor(
        "poll",
        TO,
        ParamSpec("pollQuestion", required=True),
        ParamSpec("pollOption", kind="string_array", required=True),
        ParamSpec("pollMulti", kind="boolean"),
        ParamSpec("pollDurationHours", kind="integer"),
        ParamSpec("message", providers=DISCORD_ONLY),
        providers="any",
        fallback="send_poll",
    ),
    _descriptor(
        "react",
        MESSAGE_ID,
        ParamSpec("emoji", allow_empty=True),
        ParamSpec("remove", kind="boolean"),
        CHANNEL,
        ParamSpec("chatId", required=True, fallback="to", providers=frozenset({TELEGRAM})),
        ParamSpec("chatJid", required=True, fallback="to", providers=frozenset({WHATSAPP})),
        ParamSpec("participant", providers=frozenset({WHATSAPP})),
        ParamSpec("fromMe", kind="boolean", providers=frozenset({WHATSAPP})),
        providers=frozenset({DISCORD, SLACK, TELEGRAM, WHATSAPP}),
    ),
    _descriptor("reactions", MESSAGE_ID, LIMIT, CHANNEL, providers=DISCORD_SLACK),
    _descriptor(
        "read",
        LIMIT,
        ParamSpec("before"),
        ParamSpec("after"),
        ParamSpec("around", providers=DISCORD_ONLY),
        CHANNEL,
        providers=DISCORD_SLACK,
    ),
    _descriptor(
        "edit",
        MESSAGE_ID,
        ParamSpec("message", required=True),
        CHANNEL,
        providers=DISCORD_SLACK,
    ),
    _descriptor("delete", MESSAGE_ID, CHANNEL, providers=DISCORD_SLACK),
    _descriptor("pin", MESSAGE_ID, CHANNEL, providers=DISCORD_SLACK),
    _descriptor("unpin", MESSAGE_ID, CHANNEL, providers=DISCORD_SLACK),
    _descriptor("list-pins", CHANNEL, providers=DISCORD_SLACK),
    _descriptor("permissions", CHANNEL),
    _descriptor(
        "thread-create",
        ParamSpec("threadName", required=True),
        ParamSpec("messageId"),
        ParamSpec("autoArchiveMin", kind="integer"),
        CHANNEL,
    ),
    _descriptor(
        "thread-list",
        GUILD_ID,
        ParamSpec("channelId"),
        ParamSpec("includeArchived", kind="boolean"),
        ParamSpec("before"),
        LIMIT,
    ),
    _descriptor(
        "thread-reply",
        ParamSpec("message", required=True),
        MEDIA,
        ParamSpec("replyTo"),
        CHANNEL,
    ),
    _descriptor(
        "search",
        GUILD_ID,
        ParamSpec("query", required=True),
        ParamSpec("channelId"),
        ParamSpec("channelIds", kind="string_array"),
        ParamSpec("authorId"),
        ParamSpec("authorIds", kind="string_array"),
        LIMIT,
    ),
    _descriptor(
        "sticker",
        ParamSpec("stickerId", kind="string_array", required=True, label="sticker-id"),
        ParamSpec("message"),
        TO,
    ),
    _descriptor(
        "member-info",
        USER_ID,
        ParamSpec("guildId", required=True, providers=DISCORD_ONLY),
        providers=DISCORD_SLACK,
    ),
    _descriptor("role-info", GUILD_ID),
    _descriptor(
        "emoji-list",
        ParamSpec("guildId", required=True, providers=DISCORD_ONLY),
        providers=DISCORD_SLACK,
    ),
    _descriptor(
        "emoji-upload",
        GUILD_ID,
        ParamSpec("emojiName", required=True),
        MEDIA_REQUIRED,
        ParamSpec("roleIds", kind="string_array"),
    ),
    _descriptor(
        "sticker-upload",
        GUILD_ID,
        ParamSpec("stickerName", required=True),
        ParamSpec("stickerDesc", required=True),
        ParamSpec("stickerTags", required=True),
        MEDIA_REQUIRED,
    ),
    _descriptor("role-add", GUILD_ID, USER_ID, ParamSpec("roleId", required=True)),
    _descriptor("role-remove", GUILD_ID, USER_ID, ParamSpec("roleId", required=True)),
    _descriptor("channel-info", ParamSpec("channelId", required=True)),
    _descriptor("channel-list", GUILD_ID),
    _descriptor("voice-status", GUILD_ID, USER_ID),
    _descriptor("event-list", GUILD_ID),
    _descriptor(
        "event-create",
        GUILD_ID,
        ParamSpec("eventName", required=True),
        ParamSpec("startTime", required=True),
        ParamSpec("endTime"),
        ParamSpec("desc"),
        ParamSpec("channelId"),
        ParamSpec("location"),
        ParamSpec("eventType"),
    ),
    _descriptor("timeout", *_MODERATION_PARAMS),
    _descriptor("kick", *_MODERATION_PARAMS),
    _descriptor("ban", *_MODERATION_PARAMS),
)

ACTION_DESCRIPTORS: dict[str, ActionDescriptor] = {d.name: d for d in _DESCRIPTORS}


def get_descriptor(action: str) -> Optional[ActionDescriptor]:
    """Look up an action's descriptor by name."""
    return ACTION_DESCRIPTORS.get(action)


# =============================================================================
# Dispatch routes
# =============================================================================

_CHANNEL_MESSAGE = {"channelId": "channelId", "messageId": "messageId"}
_REACT = {**_CHANNEL_MESSAGE, "emoji": "emoji", "remove": "remove"}
_MODERATION = {
    "guildId": "guildId",
    "userId": "userId",
    "durationMinutes": "durationMin",
    "until": "until",
    "reason": "reason",
    "deleteMessageDays": "deleteDays",
}


def _both(native_action: str, fields: Mapping[str, FieldSource]) -> dict:
    route = Route(native_action, fields)
    return {DISCORD: route, SLACK: route}


_ROUTES_BY_ACTION: dict[str, dict[PlatformType, Route]] = {
    "send": {
        DISCORD: Route(
            "sendMessage",
            {"to": "to", "content": "message", "mediaUrl": "media", "replyTo": "replyTo"},
        ),
        SLACK: Route(
            "sendMessage",
            {
                "to": "to",
                "content": "message",
                "mediaUrl": "media",
                "threadTs": ("threadId", "replyTo"),
            },
        ),
        TELEGRAM: Route(
            "sendMessage",
            {
                "to": "to",
                "content": "message",
                "mediaUrl": "media",
                "replyToMessageId": "replyTo",
                "messageThreadId": "threadId",
                "buttons": "buttons",
            },
        ),
    },
    "poll": {
        DISCORD: Route(
            "poll",
            {
                "to": "to",
                "question": "pollQuestion",
                "answers": "pollOption",
                "allowMultiselect": "pollMulti",
                "durationHours": "pollDurationHours",
                "content": "message",
            },
        ),
    },
    "react": {
        **_both("react", _REACT),
        TELEGRAM: Route(
            "react",
            {"chatId": "chatId", "messageId": "messageId", "emoji": "emoji", "remove": "remove"},
        ),
        WHATSAPP: Route(
            "react",
            {
                "chatJid": "chatJid",
                "messageId": "messageId",
                "emoji": "emoji",
                "remove": "remove",
                "participant": "participant",
                "fromMe": "fromMe",
            },
        ),
    },
    "reactions": _both("reactions", {**_CHANNEL_MESSAGE, "limit": "limit"}),
    "read": {
        DISCORD: Route(
            "readMessages",
            {
                "channelId": "channelId",
                "limit": "limit",
                "before": "before",
                "after": "after",
                "around": "around",
            },
        ),
        SLACK: Route(
            "readMessages",
            {"channelId": "channelId", "limit": "limit", "before": "before", "after": "after"},
        ),
    },
    "edit": _both("editMessage", {**_CHANNEL_MESSAGE, "content": "message"}),
    "delete": _both("deleteMessage", _CHANNEL_MESSAGE),
    "pin": _both("pinMessage", _CHANNEL_MESSAGE),
    "unpin": _both("unpinMessage", _CHANNEL_MESSAGE),
    "list-pins": _both("listPins", {"channelId": "channelId"}),
    "permissions": {DISCORD: Route("permissions", {"channelId": "channelId"})},
    "thread-create": {
        DISCORD: Route(
            "threadCreate",
            {
                "channelId": "channelId",
                "name": "threadName",
                "messageId": "messageId",
                "autoArchiveMinutes": "autoArchiveMin",
            },
        ),
    },
    "thread-list": {
        DISCORD: Route(
            "threadList",
            {
                "guildId": "guildId",
                "channelId": "channelId",
                "includeArchived": "includeArchived",
                "before": "before",
                "limit": "limit",
            },
        ),
    },
    "thread-reply": {
        DISCORD: Route(
            "threadReply",
            {
                "channelId": "channelId",
                "content": "message",
                "mediaUrl": "media",
                "replyTo": "replyTo",
            },
        ),
    },
    "search": {
        DISCORD: Route(
            "searchMessages",
            {
                "guildId": "guildId",
                "content": "query",
                "channelId": "channelId",
                "channelIds": "channelIds",
                "authorId": "authorId",
                "authorIds": "authorIds",
                "limit": "limit",
            },
        ),
    },
    "sticker": {
        DISCORD: Route("sticker", {"to": "to", "stickerIds": "stickerId", "content": "message"}),
    },
    "member-info": {
        DISCORD: Route("memberInfo", {"guildId": "guildId", "userId": "userId"}),
        SLACK: Route("memberInfo", {"userId": "userId"}),
    },
    "role-info": {DISCORD: Route("roleInfo", {"guildId": "guildId"})},
    "emoji-list": {
        DISCORD: Route("emojiList", {"guildId": "guildId"}),
        SLACK: Route("emojiList"),
    },
    "emoji-upload": {
        DISCORD: Route(
            "emojiUpload",
            {"guildId": "guildId", "name": "emojiName", "mediaUrl": "media", "roleIds": "roleIds"},
        ),
    },
    "sticker-upload": {
        DISCORD: Route(
            "stickerUpload",
            {
                "guildId": "guildId",
                "name": "stickerName",
                "description": "stickerDesc",
                "tags": "stickerTags",
                "mediaUrl": "media",
            },
        ),
    },
    "role-add": {
        DISCORD: Route("roleAdd", {"guildId": "guildId", "userId": "userId", "roleId": "roleId"}),
    },
    "role-remove": {
        DISCORD: Route(
            "roleRemove", {"guildId": "guildId", "userId": "userId", "roleId": "roleId"}
        ),
    },
    "channel-info": {DISCORD: Route("channelInfo", {"channelId": "channelId"})},
    "channel-list": {DISCORD: Route("channelList", {"guildId": "guildId"})},
    "voice-status": {
        DISCORD: Route("voiceStatus", {"guildId": "guildId", "userId": "userId"}),
    },
    "event-list": {DISCORD: Route("eventList", {"guildId": "guildId"})},
    "event-create": {
        DISCORD: Route(
            "eventCreate",
            {
                "guildId": "guildId",
                "name": "eventName",
                "startTime": "startTime",
                "endTime": "endTime",
                "description": "desc",
                "channelId": "channelId",
                "location": "location",
                "entityType": "eventType",
            },
        ),
    },
    "timeout": {DISCORD: Route("timeout", _MODERATION)},
    "kick": {DISCORD: Route("kick", _MODERATION)},
    "ban": {DISCORD: Route("ban", _MODERATION)},
}

ROUTES: dict[tuple[str, PlatformType], Route] = {
    (action, provider): route
    for action, by_provider in _ROUTES_BY_ACTION.items()
    for provider, route in by_provider.items()
}


def get_route(action: str, provider: PlatformType) -> Optional[Route]:
    """Look up the provider-native route for an action, if any."""
    return ROUTES.get((action, provider))
