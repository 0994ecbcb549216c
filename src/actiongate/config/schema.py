"""
Pydantic configuration schema for actiongate.

This module defines all configuration models with validation.
"""

from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Provider Account Configuration
# =============================================================================


class AccountConfig(BaseModel):
    """Settings for one named account of a messaging provider.

    ``actions`` replaces the provider-level action gates when set;
    ``capabilities`` is added to the provider-level capability list.
    """

    model_config = ConfigDict(extra="allow")

    enable: bool = True
    name: str | None = None
    actions: dict[str, bool] | None = None
    capabilities: list[str] = Field(default_factory=list)


class PlatformSectionConfig(BaseModel):
    """Base configuration shared by every provider section."""

    model_config = ConfigDict(extra="allow")

    # Fields holding the credential, and the env vars consulted for the
    # implicit "default" account when the fields are empty.
    credential_fields: ClassVar[tuple[str, ...]] = ()
    credential_env: ClassVar[tuple[str, ...]] = ()

    enable: bool = False
    actions: dict[str, bool] = Field(default_factory=dict)
    capabilities: list[str] = Field(default_factory=list)


class DiscordAccountConfig(AccountConfig):
    """Discord account settings."""

    bot_token: str = ""


class DiscordConfig(PlatformSectionConfig):
    """Discord bot configuration."""

    credential_fields: ClassVar[tuple[str, ...]] = ("bot_token",)
    credential_env: ClassVar[tuple[str, ...]] = ("DISCORD_BOT_TOKEN",)

    bot_token: str = ""
    accounts: dict[str, DiscordAccountConfig] = Field(default_factory=dict)


class SlackAccountConfig(AccountConfig):
    """Slack account settings."""

    bot_token: str = ""
    app_token: str = ""


class SlackConfig(PlatformSectionConfig):
    """Slack bot configuration.

    Action gates may be set per account; an account without its own
    ``actions`` inherits the section's.
    """

    credential_fields: ClassVar[tuple[str, ...]] = ("bot_token",)
    credential_env: ClassVar[tuple[str, ...]] = ("SLACK_BOT_TOKEN",)

    bot_token: str = ""
    app_token: str = ""
    accounts: dict[str, SlackAccountConfig] = Field(default_factory=dict)


class TelegramAccountConfig(AccountConfig):
    """Telegram account settings."""

    bot_token: str = ""


class TelegramConfig(PlatformSectionConfig):
    """Telegram bot configuration.

    Add ``inlineButtons`` to ``capabilities`` to advertise inline keyboard
    buttons on sends.
    """

    credential_fields: ClassVar[tuple[str, ...]] = ("bot_token",)
    credential_env: ClassVar[tuple[str, ...]] = ("TELEGRAM_BOT_TOKEN",)

    bot_token: str = ""
    accounts: dict[str, TelegramAccountConfig] = Field(default_factory=dict)


class WhatsAppAccountConfig(AccountConfig):
    """WhatsApp account settings."""

    phone_number_id: str = ""
    access_token: str = ""


class WhatsAppConfig(PlatformSectionConfig):
    """WhatsApp configuration."""

    credential_fields: ClassVar[tuple[str, ...]] = ("access_token",)
    credential_env: ClassVar[tuple[str, ...]] = ("WHATSAPP_ACCESS_TOKEN",)

    phone_number_id: str = ""
    access_token: str = ""
    accounts: dict[str, WhatsAppAccountConfig] = Field(default_factory=dict)


class TeamsAccountConfig(AccountConfig):
    """Microsoft Teams account settings."""

    app_id: str = ""
    app_password: str = ""
    tenant_id: str = ""


class TeamsConfig(PlatformSectionConfig):
    """Microsoft Teams bot configuration.

    Credentials are resolved only when app id, password and tenant id are
    all present.
    """

    credential_fields: ClassVar[tuple[str, ...]] = ("app_id", "app_password", "tenant_id")
    credential_env: ClassVar[tuple[str, ...]] = (
        "MSTEAMS_APP_ID",
        "MSTEAMS_APP_PASSWORD",
        "MSTEAMS_TENANT_ID",
    )

    app_id: str = ""
    app_password: str = ""
    tenant_id: str = ""
    accounts: dict[str, TeamsAccountConfig] = Field(default_factory=dict)


class SignalAccountConfig(AccountConfig):
    """Signal account settings."""

    phone_number: str = ""


class SignalConfig(PlatformSectionConfig):
    """Signal messenger configuration."""

    credential_fields: ClassVar[tuple[str, ...]] = ("phone_number",)
    credential_env: ClassVar[tuple[str, ...]] = ("SIGNAL_PHONE_NUMBER",)

    phone_number: str = ""
    accounts: dict[str, SignalAccountConfig] = Field(default_factory=dict)


class IMessageConfig(PlatformSectionConfig):
    """iMessage configuration (macOS only, no credential needed)."""

    accounts: dict[str, AccountConfig] = Field(default_factory=dict)


class PlatformsConfig(BaseModel):
    """Messaging provider configuration."""

    model_config = ConfigDict(extra="allow")

    discord: DiscordConfig = Field(default_factory=DiscordConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    whatsapp: WhatsAppConfig = Field(default_factory=WhatsAppConfig)
    teams: TeamsConfig = Field(default_factory=TeamsConfig)
    signal: SignalConfig = Field(default_factory=SignalConfig)
    imessage: IMessageConfig = Field(default_factory=IMessageConfig)


# =============================================================================
# Gateway Configuration
# =============================================================================


class GatewayConfig(BaseModel):
    """Gateway used by the provider-agnostic send and poll path."""

    model_config = ConfigDict(extra="allow")

    url: str = "http://127.0.0.1:18789"
    token: str | None = None
    timeout_ms: int = Field(default=10_000, ge=100)


# =============================================================================
# Agent Configuration
# =============================================================================


class AgentConfig(BaseModel):
    """Defaults applied to every agent invocation."""

    model_config = ConfigDict(extra="allow")

    account_id: str | None = Field(
        default=None,
        description="Account used when an invocation names none",
    )
    reply_to_mode: Literal["off", "first", "all"] = Field(
        default="off",
        description="Slack auto-threading mode for replies in the current thread",
    )

    @field_validator("reply_to_mode", mode="before")
    @classmethod
    def _off_from_bool(cls, value: object) -> object:
        # YAML and env parsing both turn a bare `off` into False
        if value is False:
            return "off"
        return value


# =============================================================================
# Root Configuration Model
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for actiongate.

    Configuration can be loaded from YAML files and environment variables,
    merged in order of priority.
    """

    model_config = ConfigDict(extra="allow")

    platforms: PlatformsConfig = Field(default_factory=PlatformsConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
