"""Data models for a single dispatch."""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field

from actiongate.actions.params import read_number_param, read_string_param
from actiongate.outbound.models import GatewayOptions
from actiongate.platforms.models import PlatformType


class DispatchRequest(BaseModel):
    """One invocation of the message operation."""

    action: str
    provider: Optional[str] = None
    account_id: Optional[str] = None
    params: dict[str, Any] = Field(default_factory=dict)
    dry_run: bool = False
    gateway: GatewayOptions = Field(default_factory=GatewayOptions)

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        default_account_id: Optional[str] = None,
    ) -> "DispatchRequest":
        """Build a request from the agent's raw parameter bag.

        Args:
            params: Raw parameters, including "action"
            default_account_id: Account used when "accountId" is absent

        Raises:
            MissingRequiredParameter: If "action" is missing
            InvalidParameterType: If a routing parameter has the wrong type
        """
        timeout_ms = read_number_param(params, "timeoutMs", integer=True)
        return cls(
            action=read_string_param(params, "action", required=True),
            provider=read_string_param(params, "provider"),
            account_id=read_string_param(params, "accountId") or default_account_id,
            params=dict(params),
            dry_run=bool(params.get("dryRun")),
            gateway=GatewayOptions(
                url=read_string_param(params, "gatewayUrl", trim=False),
                token=read_string_param(params, "gatewayToken", trim=False),
                timeout_ms=int(timeout_ms) if timeout_ms is not None else None,
            ),
        )


class ProviderActionRequest(BaseModel):
    """Provider-native request handed to a provider action handler.

    ``action`` is the provider's own action name (e.g. "readMessages") and
    ``fields`` carries the native field names.
    """

    provider: PlatformType
    action: str
    account_id: Optional[str] = None
    fields: dict[str, Any] = Field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        """Flat native payload: action, fields and account."""
        payload: dict[str, Any] = {"action": self.action, **self.fields}
        if self.account_id is not None:
            payload["accountId"] = self.account_id
        return payload


class DispatchResult(BaseModel):
    """Successful outcome of a dispatch; failures are raised instead."""

    ok: bool = True
    action: Optional[str] = None
    provider: Optional[str] = None
    data: Any = None
