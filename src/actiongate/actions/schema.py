"""Synthesize the parameter contract advertised to the agent.

The contract is data, not a runtime type: a "send" variant requiring a
target and a body, plus one shared variant for every other legal action.
Provider-only fields are left out entirely unless a usable account can
honour them.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field

from actiongate.actions.catalog import ActionCatalog, build_action_catalog
from actiongate.config.schema import Config
from actiongate.platforms.capabilities import CapabilityRegistry
from actiongate.platforms.models import PlatformType
from actiongate.tools.models import ToolParameter

logger = logging.getLogger(__name__)

INLINE_BUTTONS_CAPABILITY = "inlinebuttons"

_STRING_ARRAY = {"type": "string"}

_BUTTON_ROWS = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "text": {"type": "string"},
            "callback_data": {"type": "string"},
        },
        "required": ["text", "callback_data"],
    },
}


def _field(
    name: str,
    type: str,
    description: str,
    items: Optional[dict[str, Any]] = None,
) -> ToolParameter:
    return ToolParameter(name=name, type=type, description=description, required=False, items=items)


TARGET_FIELDS: tuple[ToolParameter, ...] = (
    _field("to", "string", "Target channel, chat or user"),
    _field("message", "string", "Message text (may be empty when media is attached)"),
)

COMMON_FIELDS: tuple[ToolParameter, ...] = (
    _field("provider", "string", "Provider to use (discord, slack, telegram, whatsapp, ...)"),
    _field("media", "string", "Media URL or path to attach"),
    _field(
        "buttons",
        "array",
        "Telegram inline keyboard buttons (array of button rows)",
        items=_BUTTON_ROWS,
    ),
    _field("messageId", "string", "Target message id"),
    _field("replyTo", "string", "Message id to reply to"),
    _field("threadId", "string", "Thread id to post into"),
    _field("accountId", "string", "Provider account to act as"),
    _field("dryRun", "boolean", "Resolve and validate without contacting the provider"),
    _field("bestEffort", "boolean", "Deliver what can be delivered when part of a send fails"),
    _field("gifPlayback", "boolean", "Send video media as an autoplaying GIF"),
    _field("emoji", "string", "Emoji to react with"),
    _field("remove", "boolean", "Remove the reaction instead of adding it"),
    _field("limit", "number", "Maximum number of items to return"),
    _field("before", "string", "Only items before this message id"),
    _field("after", "string", "Only items after this message id"),
    _field("around", "string", "Only items around this message id"),
    _field("pollQuestion", "string", "Poll question"),
    _field("pollOption", "array", "Poll answers", items=_STRING_ARRAY),
    _field("pollDurationHours", "number", "Poll duration in hours"),
    _field("pollMulti", "boolean", "Allow selecting more than one answer"),
    _field("channelId", "string", "Channel id (defaults to 'to')"),
    _field("channelIds", "array", "Channel ids to search", items=_STRING_ARRAY),
    _field("chatId", "string", "Telegram chat id (defaults to 'to')"),
    _field("chatJid", "string", "WhatsApp chat JID (defaults to 'to')"),
    _field("guildId", "string", "Discord server id"),
    _field("userId", "string", "User id"),
    _field("authorId", "string", "Author id to filter by"),
    _field("authorIds", "array", "Author ids to filter by", items=_STRING_ARRAY),
    _field("roleId", "string", "Role id"),
    _field("roleIds", "array", "Role ids allowed to use an uploaded emoji", items=_STRING_ARRAY),
    _field("emojiName", "string", "Name for an uploaded emoji"),
    _field("stickerId", "array", "Sticker ids to send", items=_STRING_ARRAY),
    _field("stickerName", "string", "Name for an uploaded sticker"),
    _field("stickerDesc", "string", "Description for an uploaded sticker"),
    _field("stickerTags", "string", "Tags for an uploaded sticker"),
    _field("threadName", "string", "Name of the thread to create"),
    _field("autoArchiveMin", "number", "Minutes of inactivity before the thread archives"),
    _field("query", "string", "Search query"),
    _field("eventName", "string", "Scheduled event name"),
    _field("eventType", "string", "Scheduled event type (stage, voice, external)"),
    _field("startTime", "string", "Event start time (ISO 8601)"),
    _field("endTime", "string", "Event end time (ISO 8601)"),
    _field("desc", "string", "Event description"),
    _field("location", "string", "Event location"),
    _field("durationMin", "number", "Timeout duration in minutes"),
    _field("until", "string", "Timeout end time (ISO 8601)"),
    _field("reason", "string", "Audit log reason"),
    _field("deleteDays", "number", "Days of messages to delete when banning"),
    _field("includeArchived", "boolean", "Include archived threads"),
    _field("participant", "string", "WhatsApp group participant JID"),
    _field("fromMe", "boolean", "Whether the WhatsApp message was sent by this account"),
    _field("gatewayUrl", "string", "Gateway URL override"),
    _field("gatewayToken", "string", "Gateway token override"),
    _field("timeoutMs", "number", "Gateway request timeout in milliseconds"),
)


class ActionVariant(BaseModel):
    """One arm of the advertised contract."""

    actions: list[str]
    required: list[str]


class ParameterContract(BaseModel):
    """The parameter shape the agent may send, derived from live capabilities."""

    variants: list[ActionVariant]
    fields: list[ToolParameter] = Field(default_factory=list)

    @property
    def field_names(self) -> list[str]:
        """Names of every advertised parameter, including action/to/message."""
        return ["action"] + [f.name for f in TARGET_FIELDS] + [f.name for f in self.fields]

    def variant_for(self, action: str) -> Optional[ActionVariant]:
        """The variant covering an action, if the action is advertised."""
        for variant in self.variants:
            if action in variant.actions:
                return variant
        return None

    def to_json_schema(self) -> dict[str, Any]:
        """Render the contract as JSON schema."""
        shared = {f.name: f.to_json_schema() for f in (*TARGET_FIELDS, *self.fields)}
        schemas = []
        for variant in self.variants:
            action_schema: dict[str, Any] = {"type": "string", "enum": list(variant.actions)}
            schemas.append(
                {
                    "type": "object",
                    "properties": {"action": action_schema, **shared},
                    "required": list(variant.required),
                }
            )
        if len(schemas) == 1:
            return schemas[0]
        return {"type": "object", "anyOf": schemas}


def build_schema(catalog: ActionCatalog, registry: CapabilityRegistry) -> ParameterContract:
    """Build the advertised contract for a catalog.

    Args:
        catalog: Legal actions
        registry: Capability snapshot the catalog was built from

    Returns:
        Contract with a "send" variant and, when other actions are legal,
        a shared variant for them
    """
    include_buttons = registry.has_capability_flag(
        PlatformType.TELEGRAM, INLINE_BUTTONS_CAPABILITY
    )
    fields = [f for f in COMMON_FIELDS if include_buttons or f.name != "buttons"]

    variants = []
    if "send" in catalog:
        variants.append(ActionVariant(actions=["send"], required=["action", "to", "message"]))
    others = [name for name in catalog.ordered() if name != "send"]
    if others:
        variants.append(ActionVariant(actions=others, required=["action"]))

    logger.debug(
        f"Built parameter contract: {len(variants)} variant(s), buttons={include_buttons}"
    )
    return ParameterContract(variants=variants, fields=fields)


def describe_schema(
    config: Config, env: Optional[Mapping[str, str]] = None
) -> tuple[ActionCatalog, ParameterContract]:
    """Compute the legal actions and the advertised contract for a config.

    Args:
        config: Configuration snapshot
        env: Environment used for credential fallback (defaults to os.environ)
    """
    registry = CapabilityRegistry.from_config(config, env)
    catalog = build_action_catalog(registry)
    return catalog, build_schema(catalog, registry)
