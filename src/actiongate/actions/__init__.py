"""The message action surface.

Architecture:
    Capabilities → Action Catalog → Parameter Contract (advertised)
    Params → Descriptor → Provider Selection → Extraction → Handler/Outbound

Key Components:
    - ActionDescriptor: Static definition of one action
    - build_action_catalog: Legal actions for a capability snapshot
    - build_schema / describe_schema: Contract advertised to the agent
    - ParameterExtractor: Typed reads from the loose parameter bag
    - ActionRouter: Validates and dispatches one invocation
"""

from actiongate.actions.catalog import ActionCatalog, ActionFamily, build_action_catalog
from actiongate.actions.descriptors import (
    ACTION_DESCRIPTORS,
    ALL_ACTIONS,
    ActionDescriptor,
    Route,
    get_descriptor,
    get_route,
)
from actiongate.actions.handlers import HandlerRegistry, ProviderActionHandler
from actiongate.actions.models import DispatchRequest, DispatchResult, ProviderActionRequest
from actiongate.actions.params import ParameterExtractor, ParamSpec
from actiongate.actions.router import ActionRouter
from actiongate.actions.schema import ParameterContract, build_schema, describe_schema
from actiongate.actions.session import ReplyFlag, SessionContext

__all__ = [
    "ACTION_DESCRIPTORS",
    "ALL_ACTIONS",
    "ActionCatalog",
    "ActionDescriptor",
    "ActionFamily",
    "ActionRouter",
    "DispatchRequest",
    "DispatchResult",
    "HandlerRegistry",
    "ParamSpec",
    "ParameterContract",
    "ParameterExtractor",
    "ProviderActionHandler",
    "ProviderActionRequest",
    "ReplyFlag",
    "Route",
    "SessionContext",
    "build_action_catalog",
    "build_schema",
    "describe_schema",
    "get_descriptor",
    "get_route",
]
