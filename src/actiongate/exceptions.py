"""
Routing exceptions for actiongate.

Every failure the router raises locally happens before any collaborator is
called. DownstreamProviderError is the single wrapper for failures raised by
a collaborator, and keeps the original exception intact on ``cause``.
"""


class ActionRouterError(Exception):
    """Base exception for message action routing errors."""

    pass


class MissingRequiredParameter(ActionRouterError):
    """A required parameter is absent (or empty where emptiness is not allowed)."""

    def __init__(self, key: str):
        super().__init__(f"{key} required")
        self.key = key


class InvalidParameterType(ActionRouterError):
    """A parameter is present but has the wrong shape."""

    def __init__(self, key: str, expected: str | None = None):
        message = f"{key} must be {expected}" if expected else f"{key} has an invalid type"
        super().__init__(message)
        self.key = key
        self.expected = expected


class UnknownAction(ActionRouterError):
    """The action name does not match any descriptor."""

    def __init__(self, name: str):
        super().__init__(f"Unknown action: {name}")
        self.name = name


class UnsupportedActionForProvider(ActionRouterError):
    """The resolved provider is not allowed to perform the action."""

    def __init__(self, action: str, provider: str):
        super().__init__(f"Action '{action}' is not supported for provider {provider}.")
        self.action = action
        self.provider = provider


class ProviderResolutionFailure(ActionRouterError):
    """No single provider could be chosen for the invocation."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class HandlerNotRegistered(ActionRouterError):
    """A provider-specific route exists but no handler was registered for it."""

    def __init__(self, provider: str):
        super().__init__(f"No action handler registered for provider {provider}")
        self.provider = provider


class DownstreamProviderError(ActionRouterError):
    """A collaborator call failed.

    The message is the collaborator's own message and the original
    exception is kept on ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, cause: BaseException, provider: str | None = None):
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause
        self.provider = provider
