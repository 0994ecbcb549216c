"""Provider action handlers and their registry."""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Protocol, Union

from actiongate.actions.models import DispatchResult, ProviderActionRequest
from actiongate.actions.session import SessionContext
from actiongate.config.schema import Config
from actiongate.platforms.models import PlatformType

logger = logging.getLogger(__name__)

HandlerResult = Union[DispatchResult, Mapping[str, Any]]


class ProviderActionHandler(Protocol):
    """Performs provider-native actions for one provider.

    Handlers own everything platform-specific (SDK calls, target parsing,
    auth). They receive the already validated native request.
    """

    async def __call__(
        self,
        request: ProviderActionRequest,
        config: Config,
        session: Optional[SessionContext],
    ) -> HandlerResult:
        ...


class HandlerRegistry:
    """Registry of provider action handlers, one per provider."""

    def __init__(self, handlers: Optional[Mapping[PlatformType, ProviderActionHandler]] = None):
        """Initialize the registry.

        Args:
            handlers: Initial handlers keyed by provider
        """
        self._handlers: dict[PlatformType, ProviderActionHandler] = {}
        for provider, handler in (handlers or {}).items():
            self.register(provider, handler)

    def register(self, provider: PlatformType, handler: ProviderActionHandler) -> None:
        """Register a handler.

        Raises:
            ValueError: If a handler for this provider is already registered
        """
        if provider in self._handlers:
            raise ValueError(f"Handler for {provider.value} already registered")

        self._handlers[provider] = handler
        logger.info(f"Registered action handler for provider: {provider.value}")

    def unregister(self, provider: PlatformType) -> bool:
        """Unregister a handler.

        Returns:
            True if a handler was removed, False if none was registered
        """
        if provider in self._handlers:
            del self._handlers[provider]
            logger.info(f"Unregistered action handler for provider: {provider.value}")
            return True
        return False

    def get(self, provider: PlatformType) -> Optional[ProviderActionHandler]:
        """Get the handler for a provider, or None."""
        return self._handlers.get(provider)

    @property
    def providers(self) -> list[PlatformType]:
        """Providers with a registered handler."""
        return list(self._handlers.keys())

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, provider: object) -> bool:
        return provider in self._handlers

    def __repr__(self) -> str:
        providers = ", ".join(p.value for p in self._handlers)
        return f"<HandlerRegistry providers=[{providers}]>"
