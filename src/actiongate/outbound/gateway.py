"""Gateway-backed outbound transport."""

import json
import logging
from typing import Any, Optional

import httpx

from actiongate.config.schema import GatewayConfig
from actiongate.outbound.models import (
    GatewayOptions,
    OutboundResult,
    SendMessageRequest,
    SendPollRequest,
)
from actiongate.outbound.transport import OutboundTransport

logger = logging.getLogger(__name__)

SEND_PATH = "/v1/send"
POLL_PATH = "/v1/poll"


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _as_text(value: Any) -> Optional[str]:
    # Gateway replies may carry numeric ids or structured errors
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


class GatewayOutbound(OutboundTransport):
    """Delivers messages and polls by posting them to the messaging gateway.

    Dry runs build the payload and return it without opening a connection.
    HTTP and timeout errors are raised as-is.
    """

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the transport.

        Args:
            config: Gateway defaults (URL, token, timeout)
            client: Shared HTTP client; a short-lived one is used per call if omitted
        """
        self._config = config or GatewayConfig()
        self._client = client

    async def send_message(self, request: SendMessageRequest) -> OutboundResult:
        """Deliver a message through the gateway."""
        payload = _compact(
            {
                "to": request.to,
                "message": request.content,
                "mediaUrl": request.media_url,
                "provider": request.provider,
                "accountId": request.account_id,
                "gifPlayback": request.gif_playback,
                "bestEffort": request.best_effort,
            }
        )
        return await self._deliver(SEND_PATH, payload, request.gateway, request.dry_run)

    async def send_poll(self, request: SendPollRequest) -> OutboundResult:
        """Deliver a poll through the gateway."""
        payload = _compact(
            {
                "to": request.to,
                "question": request.question,
                "options": request.options,
                "maxSelections": request.max_selections,
                "durationHours": request.duration_hours,
                "provider": request.provider,
                "accountId": request.account_id,
            }
        )
        return await self._deliver(POLL_PATH, payload, request.gateway, request.dry_run)

    async def _deliver(
        self,
        path: str,
        payload: dict[str, Any],
        gateway: GatewayOptions,
        dry_run: bool,
    ) -> OutboundResult:
        provider = payload.get("provider")
        if dry_run:
            logger.info(f"Dry run: would post to gateway {path} for {payload['to']}")
            return OutboundResult(
                ok=True, provider=provider, to=payload["to"], dry_run=True, payload=payload
            )

        body = await self._post(path, payload, gateway)
        message_id = body.get("messageId")
        if message_id is None:
            message_id = body.get("id")
        return OutboundResult(
            ok=bool(body.get("ok", True)),
            id=_as_text(message_id),
            error=_as_text(body.get("error")),
            provider=_as_text(body.get("provider")) or provider,
            to=payload["to"],
        )

    async def _post(
        self, path: str, payload: dict[str, Any], gateway: GatewayOptions
    ) -> dict[str, Any]:
        url = (gateway.url or self._config.url).rstrip("/") + path
        token = gateway.token or self._config.token
        timeout = (gateway.timeout_ms or self._config.timeout_ms) / 1000

        headers = {"X-Client-Name": gateway.client_name, "X-Client-Mode": gateway.mode}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"POST {url}")
        if self._client is not None:
            response = await self._client.post(url, json=payload, headers=headers, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(url, json=payload, headers=headers)

        response.raise_for_status()
        if not response.content:
            return {}
        body = response.json()
        return body if isinstance(body, dict) else {}
