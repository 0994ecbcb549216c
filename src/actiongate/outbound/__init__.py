"""Provider-agnostic send and poll path.

Key Components:
    - OutboundTransport: Abstract send/poll collaborator
    - GatewayOutbound: Default transport posting to the messaging gateway
"""

from actiongate.outbound.gateway import GatewayOutbound
from actiongate.outbound.models import (
    GatewayOptions,
    OutboundResult,
    SendMessageRequest,
    SendPollRequest,
)
from actiongate.outbound.transport import OutboundTransport

__all__ = [
    "GatewayOptions",
    "GatewayOutbound",
    "OutboundResult",
    "OutboundTransport",
    "SendMessageRequest",
    "SendPollRequest",
]
