"""Action router: the dispatch core of the message operation."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Optional, TypeVar, Union

from actiongate.actions.catalog import ActionCatalog
from actiongate.actions.descriptors import ActionDescriptor, Route, get_descriptor, get_route
from actiongate.actions.handlers import HandlerRegistry, HandlerResult, ProviderActionHandler
from actiongate.actions.models import DispatchRequest, DispatchResult, ProviderActionRequest
from actiongate.actions.params import ParameterExtractor
from actiongate.actions.schema import ParameterContract, describe_schema
from actiongate.actions.session import SessionContext
from actiongate.config.schema import Config
from actiongate.exceptions import (
    ActionRouterError,
    DownstreamProviderError,
    HandlerNotRegistered,
    UnknownAction,
    UnsupportedActionForProvider,
)
from actiongate.outbound.gateway import GatewayOutbound
from actiongate.outbound.models import OutboundResult, SendMessageRequest, SendPollRequest
from actiongate.outbound.transport import OutboundTransport
from actiongate.platforms.capabilities import CapabilityRegistry
from actiongate.platforms.models import PlatformType
from actiongate.platforms.selection import ProviderSelection, resolve_provider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActionRouter:
    """Routes message actions to provider handlers or the generic path.

    Each dispatch runs through the same phases:
    1. Reject unknown actions (before provider resolution)
    2. Resolve the provider
    3. Check the provider may perform the action (before reading params)
    4. Extract and validate parameters
    5. Call the provider handler or the outbound transport

    The router holds no per-call state. Capabilities are re-read from the
    configuration on every call.
    """

    def __init__(
        self,
        config: Config,
        handlers: Union[HandlerRegistry, Mapping[PlatformType, ProviderActionHandler], None] = None,
        outbound: Optional[OutboundTransport] = None,
        extractor: Optional[ParameterExtractor] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Initialize the router.

        Args:
            config: Configuration snapshot to route against
            handlers: Provider action handlers
            outbound: Generic send/poll transport (defaults to the gateway)
            extractor: Parameter extractor
            env: Environment used for credential fallback (defaults to os.environ)
        """
        self._config = config
        if isinstance(handlers, HandlerRegistry):
            self._handlers = handlers
        else:
            self._handlers = HandlerRegistry(handlers)
        self._outbound = outbound or GatewayOutbound(config.gateway)
        self._extractor = extractor or ParameterExtractor()
        self._env = env

    @property
    def config(self) -> Config:
        """Configuration the router routes against."""
        return self._config

    @property
    def handlers(self) -> HandlerRegistry:
        """Registered provider action handlers."""
        return self._handlers

    def capabilities(self) -> CapabilityRegistry:
        """Fresh capability snapshot for the current configuration."""
        return CapabilityRegistry.from_config(self._config, self._env)

    def describe_schema(self) -> tuple[ActionCatalog, ParameterContract]:
        """Legal actions and the advertised parameter contract."""
        return describe_schema(self._config, self._env)

    async def execute(
        self,
        action: str,
        params: Mapping[str, Any],
        session: Optional[SessionContext] = None,
    ) -> DispatchResult:
        """Run one action from a raw parameter bag.

        Args:
            action: Action name (e.g. "send", "react")
            params: Raw parameters as sent by the agent
            session: Caller's session context, if any

        Returns:
            The dispatch result

        Raises:
            ActionRouterError: On any routing, validation or downstream failure
        """
        request = DispatchRequest.from_params(
            {**params, "action": action},
            default_account_id=self._config.agent.account_id,
        )
        return await self.dispatch(request, session)

    async def dispatch(
        self,
        request: DispatchRequest,
        session: Optional[SessionContext] = None,
    ) -> DispatchResult:
        """Run one already-built dispatch request.

        Raises:
            UnknownAction: If no descriptor matches the action
            ProviderResolutionFailure: If no single provider can be chosen
            UnsupportedActionForProvider: If the provider cannot do the action
            MissingRequiredParameter: If a required parameter is missing
            InvalidParameterType: If a parameter has the wrong type
            HandlerNotRegistered: If the provider route has no handler
            DownstreamProviderError: If the handler or transport fails
        """
        descriptor = get_descriptor(request.action)
        if descriptor is None:
            raise UnknownAction(request.action)

        selection = resolve_provider(self.capabilities(), request.provider, request.account_id)
        provider = selection.provider
        if not descriptor.allows(provider):
            raise UnsupportedActionForProvider(descriptor.name, provider.value)

        values = self._extractor.extract(descriptor.params_for(provider), request.params)

        logger.info(
            f"Dispatching {descriptor.name} via {provider.value} "
            f"(account={selection.account_id}, dry_run={request.dry_run})"
        )

        route = get_route(descriptor.name, provider)
        if request.dry_run:
            if descriptor.fallback is not None:
                return await self._dispatch_outbound(descriptor, request, selection, values)
            return self._preview(descriptor, route, selection, values)

        if route is not None:
            return await self._dispatch_route(descriptor, route, selection, values, session)
        if descriptor.fallback is not None:
            return await self._dispatch_outbound(descriptor, request, selection, values)
        raise UnsupportedActionForProvider(descriptor.name, provider.value)

    async def _dispatch_route(
        self,
        descriptor: ActionDescriptor,
        route: Route,
        selection: ProviderSelection,
        values: dict[str, Any],
        session: Optional[SessionContext],
    ) -> DispatchResult:
        provider = selection.provider
        handler = self._handlers.get(provider)
        if handler is None:
            raise HandlerNotRegistered(provider.value)

        fields = route.build_fields(values)
        slack_send = provider == PlatformType.SLACK and descriptor.name == "send"
        if slack_send and session is not None and "threadTs" not in fields:
            thread_ts = session.auto_thread_ts(values.get("to"))
            if thread_ts:
                fields["threadTs"] = thread_ts

        native = ProviderActionRequest(
            provider=provider,
            action=route.native_action,
            account_id=selection.account_id,
            fields=fields,
        )
        result = await self._call(provider, lambda: handler(native, self._config, session))

        if slack_send and session is not None:
            session.record_reply(values.get("to"))
        return self._normalize(result, descriptor.name, provider)

    async def _dispatch_outbound(
        self,
        descriptor: ActionDescriptor,
        request: DispatchRequest,
        selection: ProviderSelection,
        values: dict[str, Any],
    ) -> DispatchResult:
        provider = selection.provider
        if descriptor.fallback == "send_poll":
            options = values["pollOption"]
            max_selections = max(2, len(options)) if values.get("pollMulti") else 1
            poll = SendPollRequest(
                to=values["to"],
                question=values["pollQuestion"],
                options=options,
                max_selections=max_selections,
                duration_hours=values.get("pollDurationHours"),
                provider=provider.value,
                account_id=selection.account_id,
                dry_run=request.dry_run,
                gateway=request.gateway,
            )
            result = await self._call(provider, lambda: self._outbound.send_poll(poll))
        else:
            message = SendMessageRequest(
                to=values["to"],
                content=values["message"],
                media_url=values.get("media") or None,
                provider=provider.value,
                account_id=selection.account_id,
                gif_playback=bool(values.get("gifPlayback")),
                best_effort=values.get("bestEffort"),
                dry_run=request.dry_run,
                gateway=request.gateway,
            )
            result = await self._call(provider, lambda: self._outbound.send_message(message))
        return self._normalize(result, descriptor.name, provider)

    def _preview(
        self,
        descriptor: ActionDescriptor,
        route: Optional[Route],
        selection: ProviderSelection,
        values: dict[str, Any],
    ) -> DispatchResult:
        if route is not None:
            native_action = route.native_action
            fields = route.build_fields(values)
        else:
            native_action = descriptor.name
            fields = {key: value for key, value in values.items() if value is not None}
        native = ProviderActionRequest(
            provider=selection.provider,
            action=native_action,
            account_id=selection.account_id,
            fields=fields,
        )
        logger.info(f"Dry run: {descriptor.name} not sent to {selection.provider.value}")
        return DispatchResult(
            action=descriptor.name,
            provider=selection.provider.value,
            data={"dryRun": True, "request": native.payload()},
        )

    async def _call(self, provider: PlatformType, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except ActionRouterError:
            raise
        except Exception as e:
            logger.error(f"Downstream call to {provider.value} failed: {e}", exc_info=True)
            raise DownstreamProviderError(e, provider=provider.value) from e

    @staticmethod
    def _normalize(
        result: Union[HandlerResult, OutboundResult, Any],
        action: str,
        provider: PlatformType,
    ) -> DispatchResult:
        if isinstance(result, DispatchResult):
            return result.model_copy(
                update={
                    "action": result.action or action,
                    "provider": result.provider or provider.value,
                }
            )
        if isinstance(result, OutboundResult):
            data: Any = result.model_dump(exclude_none=True)
        elif isinstance(result, Mapping):
            data = dict(result)
        else:
            data = result
        return DispatchResult(action=action, provider=provider.value, data=data)
