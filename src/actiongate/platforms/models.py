"""Data models for messaging providers and their accounts."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PlatformType(str, Enum):
    """Supported messaging providers."""

    DISCORD = "discord"
    SLACK = "slack"
    TELEGRAM = "telegram"
    WHATSAPP = "whatsapp"
    TEAMS = "teams"
    SIGNAL = "signal"
    IMESSAGE = "imessage"


PLATFORM_ALIASES: dict[str, PlatformType] = {
    "msteams": PlatformType.TEAMS,
    "imsg": PlatformType.IMESSAGE,
}


def parse_platform(value: str) -> PlatformType | None:
    """Parse a provider name, accepting aliases and any casing.

    Returns:
        The provider, or None if the name is not recognised
    """
    normalized = value.strip().lower()
    if normalized in PLATFORM_ALIASES:
        return PLATFORM_ALIASES[normalized]
    try:
        return PlatformType(normalized)
    except ValueError:
        return None


CredentialSource = Literal["config", "env", "none"]


class ProviderAccount(BaseModel):
    """One resolved account of a messaging provider.

    This is a view over configuration: it is rebuilt every time the
    capability registry is built and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    provider: PlatformType
    enabled: bool
    credential_source: CredentialSource = "none"
    name: str | None = None
    gates: dict[str, bool] = Field(default_factory=dict)
    capabilities: frozenset[str] = Field(default_factory=frozenset)

    @property
    def credential_present(self) -> bool:
        """Whether a credential was found for this account."""
        return self.credential_source != "none"

    @property
    def usable(self) -> bool:
        """Enabled and credentialed."""
        return self.enabled and self.credential_present

    def gate(self, key: str, default: bool = True) -> bool:
        """Evaluate an action gate for this account.

        An explicit True/False in configuration wins; an absent key
        falls back to ``default``. Keys match case-insensitively, since
        environment overrides arrive lower-cased.
        """
        value = self.gates.get(key)
        if value is None:
            lowered = key.lower()
            value = next((v for k, v in self.gates.items() if k.lower() == lowered), None)
        if value is None:
            return default
        return value

    def __str__(self) -> str:
        """String representation for logging."""
        return f"{self.provider.value}:{self.id}"
