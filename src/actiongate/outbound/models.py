"""Data models for the provider-agnostic send and poll path."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class GatewayOptions(BaseModel):
    """Per-call overrides for the gateway connection."""

    url: Optional[str] = None
    token: Optional[str] = None
    timeout_ms: Optional[int] = None
    client_name: Literal["agent"] = "agent"
    mode: Literal["agent"] = "agent"


class SendMessageRequest(BaseModel):
    """A message to deliver through the generic path."""

    to: str
    content: str
    media_url: Optional[str] = None
    provider: Optional[str] = None
    account_id: Optional[str] = None
    gif_playback: bool = False
    best_effort: Optional[bool] = None
    dry_run: bool = False
    gateway: GatewayOptions = Field(default_factory=GatewayOptions)


class SendPollRequest(BaseModel):
    """A poll to deliver through the generic path."""

    to: str
    question: str
    options: list[str]
    max_selections: int = Field(default=1, ge=1)
    duration_hours: Optional[int] = None
    provider: Optional[str] = None
    account_id: Optional[str] = None
    dry_run: bool = False
    gateway: GatewayOptions = Field(default_factory=GatewayOptions)


class OutboundResult(BaseModel):
    """What the generic path reports back.

    ``ok`` may be False when the gateway accepted the call but could not
    deliver; that nuance is passed through to the caller untouched.
    """

    ok: bool = True
    id: Optional[str] = None
    error: Optional[str] = None
    provider: Optional[str] = None
    to: Optional[str] = None
    via: Literal["gateway", "direct"] = "gateway"
    dry_run: bool = False
    payload: Optional[dict[str, Any]] = None
