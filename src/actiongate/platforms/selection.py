"""Provider selection for a single invocation."""

import logging
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from actiongate.exceptions import ProviderResolutionFailure
from actiongate.platforms.accounts import normalize_account_id
from actiongate.platforms.capabilities import CapabilityRegistry
from actiongate.platforms.models import PlatformType, parse_platform

logger = logging.getLogger(__name__)


class ProviderSelection(BaseModel):
    """The provider (and account, when known) an invocation targets."""

    model_config = ConfigDict(frozen=True)

    provider: PlatformType
    account_id: Optional[str] = None


def _explicit_provider(value: Union[str, PlatformType]) -> PlatformType:
    if isinstance(value, PlatformType):
        return value
    provider = parse_platform(value)
    if provider is None:
        raise ProviderResolutionFailure(f"Unknown provider: {value}")
    return provider


def resolve_provider(
    registry: CapabilityRegistry,
    provider: Union[str, PlatformType, None] = None,
    account_id: Optional[str] = None,
) -> ProviderSelection:
    """Resolve the target provider for an invocation.

    First match wins:
    1. An explicit provider.
    2. The only enabled provider owning an enabled account named ``account_id``.
    3. The only enabled provider.

    Args:
        registry: Capability snapshot to select from
        provider: Explicit provider name, if the caller gave one
        account_id: Explicit or agent-default account id

    Returns:
        The selection, carrying the normalized account id when one was given
        or when the provider has exactly one enabled account

    Raises:
        ProviderResolutionFailure: If the provider is unknown, nothing is
            configured, the choice is ambiguous, or the account does not exist
    """
    wanted_account = None
    if account_id is not None and account_id.strip():
        wanted_account = normalize_account_id(account_id)

    selected: Optional[PlatformType] = None
    if isinstance(provider, PlatformType) or (provider is not None and provider.strip()):
        selected = _explicit_provider(provider)
    else:
        enabled = registry.enabled_providers()
        if wanted_account is not None:
            owners = [p for p in enabled if registry.find_account(p, wanted_account)]
            if len(owners) == 1:
                selected = owners[0]
        if selected is None:
            if len(enabled) == 1:
                selected = enabled[0]
            elif not enabled:
                logger.warning("No messaging provider has an enabled, credentialed account")
                raise ProviderResolutionFailure(
                    "No messaging provider is configured; enable one or pass provider"
                )
            else:
                names = ", ".join(p.value for p in enabled)
                raise ProviderResolutionFailure(
                    f"Multiple providers are enabled ({names}); pass provider to choose one"
                )

    accounts = registry.enabled_accounts(selected)
    if wanted_account is not None:
        if accounts and registry.find_account(selected, wanted_account) is None:
            raise ProviderResolutionFailure(
                f"Account '{wanted_account}' is not enabled for {selected.value}"
            )
        selection = ProviderSelection(provider=selected, account_id=wanted_account)
    else:
        only = accounts[0].id if len(accounts) == 1 else None
        selection = ProviderSelection(provider=selected, account_id=only)

    logger.debug(f"Resolved provider {selection.provider.value} (account={selection.account_id})")
    return selection
