"""Messaging providers, their accounts and capability gates.

Architecture:
    Config → Provider Accounts → Capability Registry → Provider Selection

Key Components:
    - PlatformType: Supported messaging providers
    - ProviderAccount: One resolved account with its action gates
    - CapabilityRegistry: Snapshot answering "is this capability live?"
    - resolve_provider: Picks the provider for one invocation
"""

from actiongate.platforms.accounts import (
    DEFAULT_ACCOUNT_ID,
    credentials_resolved,
    list_enabled_accounts,
    normalize_account_id,
    resolve_accounts,
)
from actiongate.platforms.capabilities import CapabilityRegistry
from actiongate.platforms.models import PlatformType, ProviderAccount, parse_platform
from actiongate.platforms.selection import ProviderSelection, resolve_provider

__all__ = [
    "CapabilityRegistry",
    "DEFAULT_ACCOUNT_ID",
    "PlatformType",
    "ProviderAccount",
    "ProviderSelection",
    "credentials_resolved",
    "list_enabled_accounts",
    "normalize_account_id",
    "parse_platform",
    "resolve_accounts",
    "resolve_provider",
]
