"""Capability registry: which providers and action gates are live."""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from actiongate.config.schema import Config
from actiongate.platforms.accounts import normalize_account_id, resolve_accounts
from actiongate.platforms.models import PlatformType, ProviderAccount

logger = logging.getLogger(__name__)


class CapabilityRegistry:
    """Read-only view of provider accounts and their action gates.

    A registry is a snapshot: build a new one from configuration whenever
    the configuration may have changed. Queries only look at accounts that
    are both enabled and credentialed, and a capability is allowed for a
    provider when any one of those accounts allows it.
    """

    def __init__(self, accounts: Iterable[ProviderAccount]) -> None:
        """Initialize the registry.

        Args:
            accounts: Resolved accounts, of any provider and any state
        """
        self._accounts: tuple[ProviderAccount, ...] = tuple(accounts)

    @classmethod
    def from_config(
        cls, config: Config, env: Optional[Mapping[str, str]] = None
    ) -> "CapabilityRegistry":
        """Build a registry from a configuration snapshot.

        Args:
            config: Configuration to read
            env: Environment used for credential fallback (defaults to os.environ)
        """
        accounts: list[ProviderAccount] = []
        for provider in PlatformType:
            accounts.extend(resolve_accounts(config, provider, env))
        registry = cls(accounts)
        logger.debug(f"Built capability registry: {registry!r}")
        return registry

    def accounts(self, provider: Optional[PlatformType] = None) -> list[ProviderAccount]:
        """All resolved accounts, optionally for one provider."""
        if provider is None:
            return list(self._accounts)
        return [account for account in self._accounts if account.provider == provider]

    def enabled_accounts(self, provider: PlatformType) -> list[ProviderAccount]:
        """Accounts of a provider that are enabled and have a credential."""
        return [account for account in self.accounts(provider) if account.usable]

    def provider_enabled(self, provider: PlatformType) -> bool:
        """Whether the provider has at least one usable account."""
        return bool(self.enabled_accounts(provider))

    def enabled_providers(self) -> list[PlatformType]:
        """Providers with a usable account, in canonical order."""
        return [provider for provider in PlatformType if self.provider_enabled(provider)]

    def capability_allowed(self, provider: PlatformType, key: str, default: bool = True) -> bool:
        """Whether any usable account of the provider allows a capability.

        Args:
            provider: Provider to check
            key: Action gate key (e.g. "reactions")
            default: Value used by accounts that do not set the gate

        Returns:
            True if at least one usable account's gate evaluates to True
        """
        return any(account.gate(key, default) for account in self.enabled_accounts(provider))

    def has_capability_flag(self, provider: PlatformType, flag: str) -> bool:
        """Whether any usable account lists a capability flag (case-insensitive)."""
        wanted = flag.strip().lower()
        return any(wanted in account.capabilities for account in self.enabled_accounts(provider))

    def find_account(self, provider: PlatformType, account_id: str) -> Optional[ProviderAccount]:
        """Find a usable account of a provider by (normalized) id."""
        normalized = normalize_account_id(account_id)
        for account in self.enabled_accounts(provider):
            if account.id == normalized:
                return account
        return None

    def __len__(self) -> int:
        """Number of resolved accounts."""
        return len(self._accounts)

    def __repr__(self) -> str:
        """Representation."""
        enabled = ", ".join(
            str(account) for account in self._accounts if account.usable
        )
        return f"<CapabilityRegistry enabled=[{enabled}]>"
