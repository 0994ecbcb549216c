"""Compute which actions are currently legal.

The catalog is a pure function of a CapabilityRegistry snapshot: the same
snapshot always yields the same set, whatever order the accounts are in.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from actiongate.actions.descriptors import ALL_ACTIONS
from actiongate.platforms.capabilities import CapabilityRegistry
from actiongate.platforms.models import PlatformType

logger = logging.getLogger(__name__)

Predicate = Callable[[CapabilityRegistry], bool]


def grant(provider: PlatformType, key: str, default: bool = True) -> Predicate:
    """Predicate: some usable account of ``provider`` allows ``key``."""

    def check(registry: CapabilityRegistry) -> bool:
        return registry.capability_allowed(provider, key, default)

    check.__name__ = f"{provider.value}:{key}"
    return check


def present(provider: PlatformType) -> Predicate:
    """Predicate: ``provider`` has a usable (enabled, credentialed) account."""

    def check(registry: CapabilityRegistry) -> bool:
        return registry.provider_enabled(provider)

    check.__name__ = f"{provider.value}:present"
    return check


def any_of(*predicates: Predicate) -> Predicate:
    """Predicate: at least one of ``predicates`` holds."""

    def check(registry: CapabilityRegistry) -> bool:
        return any(predicate(registry) for predicate in predicates)

    check.__name__ = " | ".join(p.__name__ for p in predicates)
    return check


@dataclass(frozen=True)
class ActionFamily:
    """Actions that become legal together when ``enabled`` holds."""

    actions: tuple[str, ...]
    enabled: Predicate


DISCORD = PlatformType.DISCORD
SLACK = PlatformType.SLACK
TELEGRAM = PlatformType.TELEGRAM
WHATSAPP = PlatformType.WHATSAPP
TEAMS = PlatformType.TEAMS

# Telegram and WhatsApp can toggle a reaction but cannot list them, so
# "react" and "reactions" are gated differently.
ACTION_FAMILIES: tuple[ActionFamily, ...] = (
    ActionFamily(
        ("react",),
        any_of(
            grant(DISCORD, "reactions"),
            grant(SLACK, "reactions"),
            grant(TELEGRAM, "reactions"),
            grant(WHATSAPP, "reactions"),
        ),
    ),
    ActionFamily(("reactions",), any_of(grant(DISCORD, "reactions"), grant(SLACK, "reactions"))),
    ActionFamily(
        ("read", "edit", "delete"),
        any_of(grant(DISCORD, "messages"), grant(SLACK, "messages")),
    ),
    ActionFamily(("pin", "unpin", "list-pins"), any_of(grant(DISCORD, "pins"), grant(SLACK, "pins"))),
    ActionFamily(
        ("poll",),
        any_of(grant(DISCORD, "polls"), grant(WHATSAPP, "polls"), present(TEAMS)),
    ),
    ActionFamily(("permissions",), grant(DISCORD, "permissions")),
    ActionFamily(("thread-create", "thread-list", "thread-reply"), grant(DISCORD, "threads")),
    ActionFamily(("search",), grant(DISCORD, "search")),
    ActionFamily(("sticker",), grant(DISCORD, "stickers")),
    ActionFamily(
        ("member-info",),
        any_of(grant(DISCORD, "memberInfo"), grant(SLACK, "memberInfo")),
    ),
    ActionFamily(("role-info",), grant(DISCORD, "roleInfo")),
    ActionFamily(
        ("emoji-list",),
        any_of(grant(DISCORD, "reactions"), grant(SLACK, "emojiList")),
    ),
    ActionFamily(("emoji-upload",), grant(DISCORD, "emojiUploads")),
    ActionFamily(("sticker-upload",), grant(DISCORD, "stickerUploads")),
    ActionFamily(("role-add", "role-remove"), grant(DISCORD, "roles", default=False)),
    ActionFamily(("channel-info", "channel-list"), grant(DISCORD, "channelInfo")),
    ActionFamily(("voice-status",), grant(DISCORD, "voiceStatus")),
    ActionFamily(("event-list", "event-create"), grant(DISCORD, "events")),
    ActionFamily(("timeout", "kick", "ban"), grant(DISCORD, "moderation", default=False)),
)


@dataclass(frozen=True)
class ActionCatalog:
    """The set of action names currently legal. Always contains "send"."""

    actions: frozenset[str]

    def ordered(self) -> list[str]:
        """Action names in canonical order."""
        return [name for name in ALL_ACTIONS if name in self.actions]

    def __contains__(self, action: object) -> bool:
        return action in self.actions

    def __iter__(self) -> Iterator[str]:
        return iter(self.ordered())

    def __len__(self) -> int:
        return len(self.actions)


def build_action_catalog(
    registry: CapabilityRegistry,
    families: Iterable[ActionFamily] = ACTION_FAMILIES,
) -> ActionCatalog:
    """Compute the legal actions for a capability snapshot.

    Args:
        registry: Capability snapshot
        families: Action families to evaluate (defaults to the built-in table)

    Returns:
        Catalog containing "send" plus every family whose predicate holds
    """
    actions = {"send"}
    for family in families:
        if family.enabled(registry):
            actions.update(family.actions)

    catalog = ActionCatalog(actions=frozenset(actions))
    logger.debug(f"Action catalog: {', '.join(catalog.ordered())}")
    return catalog
