"""Resolve provider accounts from configuration.

Each provider section may declare named accounts. With none declared the
section itself describes a single implicit ``default`` account. Only the
default account falls back to the section's credential fields and the
provider's environment variables.
"""

import os
import re
from collections.abc import Mapping

from actiongate.config.schema import AccountConfig, Config, PlatformSectionConfig
from actiongate.platforms.models import CredentialSource, PlatformType, ProviderAccount

DEFAULT_ACCOUNT_ID = "default"

_INVALID_ACCOUNT_CHARS = re.compile(r"[^a-z0-9_-]+")
_ENV_REFERENCE = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")


def normalize_account_id(value: str | None) -> str:
    """Normalize an account id for comparison.

    Examples:
        >>> normalize_account_id("  Work Bot ")
        'work-bot'
        >>> normalize_account_id(None)
        'default'
    """
    trimmed = (value or "").strip().lower()
    if not trimmed:
        return DEFAULT_ACCOUNT_ID
    normalized = _INVALID_ACCOUNT_CHARS.sub("-", trimmed).strip("-")
    return normalized or DEFAULT_ACCOUNT_ID


def get_platform_section(config: Config, provider: PlatformType) -> PlatformSectionConfig:
    """Return the configuration section for a provider."""
    return getattr(config.platforms, provider.value)


def _expand(value: object, env: Mapping[str, str]) -> str:
    """Resolve a credential value, expanding a ``${VAR}`` reference."""
    if not isinstance(value, str):
        return ""
    match = _ENV_REFERENCE.match(value.strip())
    if match:
        return env.get(match.group(1), "").strip()
    return value.strip()


def _has_fields(source: object, fields: tuple[str, ...], env: Mapping[str, str]) -> bool:
    return all(_expand(getattr(source, field, ""), env) for field in fields)


def _credential_source(
    section: PlatformSectionConfig,
    account: AccountConfig | None,
    account_id: str,
    env: Mapping[str, str],
) -> CredentialSource:
    fields = type(section).credential_fields
    if not fields:
        return "config"
    if account is not None and _has_fields(account, fields, env):
        return "config"
    if account_id != DEFAULT_ACCOUNT_ID:
        return "none"
    if _has_fields(section, fields, env):
        return "config"
    env_vars = type(section).credential_env
    if env_vars and all(env.get(var, "").strip() for var in env_vars):
        return "env"
    return "none"


def _capabilities(section: PlatformSectionConfig, account: AccountConfig | None) -> frozenset[str]:
    entries = list(section.capabilities)
    if account is not None:
        entries.extend(account.capabilities)
    return frozenset(str(entry).strip().lower() for entry in entries if str(entry).strip())


def resolve_accounts(
    config: Config,
    provider: PlatformType,
    env: Mapping[str, str] | None = None,
) -> list[ProviderAccount]:
    """Resolve every account of a provider, enabled or not.

    Args:
        config: Configuration snapshot
        provider: Provider to resolve
        env: Environment used for credential fallback. Defaults to os.environ.

    Returns:
        Accounts in declaration order
    """
    env = os.environ if env is None else env
    section = get_platform_section(config, provider)
    declared: dict[str, AccountConfig] = getattr(section, "accounts", {}) or {}

    entries: list[tuple[str, AccountConfig | None]]
    if declared:
        entries = [(normalize_account_id(key), account) for key, account in declared.items()]
    else:
        entries = [(DEFAULT_ACCOUNT_ID, None)]

    accounts = []
    for account_id, account in entries:
        gates = section.actions
        if account is not None and account.actions is not None:
            gates = account.actions
        accounts.append(
            ProviderAccount(
                id=account_id,
                provider=provider,
                enabled=section.enable and (account is None or account.enable),
                credential_source=_credential_source(section, account, account_id, env),
                name=account.name if account is not None else None,
                gates=dict(gates),
                capabilities=_capabilities(section, account),
            )
        )
    return accounts


def list_enabled_accounts(
    config: Config,
    provider: PlatformType,
    env: Mapping[str, str] | None = None,
) -> list[ProviderAccount]:
    """Accounts of a provider that are enabled and have a credential."""
    return [account for account in resolve_accounts(config, provider, env) if account.usable]


def list_enabled_discord_accounts(
    config: Config, env: Mapping[str, str] | None = None
) -> list[ProviderAccount]:
    """Enabled Discord accounts with a bot token."""
    return list_enabled_accounts(config, PlatformType.DISCORD, env)


def list_enabled_slack_accounts(
    config: Config, env: Mapping[str, str] | None = None
) -> list[ProviderAccount]:
    """Enabled Slack accounts with a bot token."""
    return list_enabled_accounts(config, PlatformType.SLACK, env)


def list_enabled_telegram_accounts(
    config: Config, env: Mapping[str, str] | None = None
) -> list[ProviderAccount]:
    """Enabled Telegram accounts with a bot token."""
    return list_enabled_accounts(config, PlatformType.TELEGRAM, env)


def list_enabled_whatsapp_accounts(
    config: Config, env: Mapping[str, str] | None = None
) -> list[ProviderAccount]:
    """Enabled WhatsApp accounts with an access token."""
    return list_enabled_accounts(config, PlatformType.WHATSAPP, env)


def credentials_resolved(
    config: Config,
    provider: PlatformType,
    env: Mapping[str, str] | None = None,
) -> bool:
    """Whether the provider is enabled and any of its accounts has credentials."""
    return bool(list_enabled_accounts(config, provider, env))
