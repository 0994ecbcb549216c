"""Per-session context passed into a dispatch.

The router keeps no state between calls. The one piece of mutable state a
dispatch may touch is the caller's ReplyFlag, which implements Slack's
"thread only the first reply" mode. A flag belongs to exactly one session:
concurrent dispatches of the same session must be serialized by the caller,
and different sessions must use different flags.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional

from actiongate.config.schema import Config

ReplyToMode = Literal["off", "first", "all"]

_CHANNEL_PREFIXES = ("channel:", "#")


@dataclass
class ReplyFlag:
    """Mutable cell recording whether the session already replied."""

    value: bool = False


def _normalize_channel(target: str) -> str:
    normalized = target.strip().lower()
    for prefix in _CHANNEL_PREFIXES:
        if normalized.startswith(prefix):
            normalized = normalized[len(prefix) :]
    return normalized


@dataclass
class SessionContext:
    """Where the agent is currently talking, for auto-threading replies."""

    current_channel_id: Optional[str] = None
    current_thread_ts: Optional[str] = None
    reply_to_mode: ReplyToMode = "off"
    has_replied: ReplyFlag = field(default_factory=ReplyFlag)

    @classmethod
    def from_config(
        cls,
        config: Config,
        current_channel_id: Optional[str] = None,
        current_thread_ts: Optional[str] = None,
    ) -> "SessionContext":
        """Session using the configured ``agent.reply_to_mode``."""
        return cls(
            current_channel_id=current_channel_id,
            current_thread_ts=current_thread_ts,
            reply_to_mode=config.agent.reply_to_mode,
        )

    def targets_current_channel(self, to: Optional[str]) -> bool:
        """Whether ``to`` names the session's current channel."""
        if not to or not self.current_channel_id:
            return False
        return _normalize_channel(to) == _normalize_channel(self.current_channel_id)

    def auto_thread_ts(self, to: Optional[str]) -> Optional[str]:
        """Thread a reply should go into when the caller named none.

        Returns:
            The current thread for "all", the current thread for "first"
            until the session has replied, otherwise None
        """
        if self.reply_to_mode == "off" or not self.current_thread_ts:
            return None
        if not self.targets_current_channel(to):
            return None
        if self.reply_to_mode == "all":
            return self.current_thread_ts
        if not self.has_replied.value:
            return self.current_thread_ts
        return None

    def record_reply(self, to: Optional[str]) -> None:
        """Mark the session as replied after a send to its current channel."""
        if self.reply_to_mode == "first" and self.targets_current_channel(to):
            self.has_replied.value = True
