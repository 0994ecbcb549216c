"""Outbound transport protocol definition."""

from abc import ABC, abstractmethod

from actiongate.outbound.models import OutboundResult, SendMessageRequest, SendPollRequest


class OutboundTransport(ABC):
    """Provider-agnostic delivery of messages and polls.

    The router falls back to a transport when no provider-specific handler
    applies, and always uses it for dry runs of sends and polls.
    """

    @abstractmethod
    async def send_message(self, request: SendMessageRequest) -> OutboundResult:
        """Deliver a message.

        Args:
            request: The message to deliver

        Returns:
            Delivery result

        Raises:
            Exception: If delivery fails; the router forwards it unchanged
        """
        ...

    @abstractmethod
    async def send_poll(self, request: SendPollRequest) -> OutboundResult:
        """Deliver a poll.

        Args:
            request: The poll to deliver

        Returns:
            Delivery result

        Raises:
            Exception: If delivery fails; the router forwards it unchanged
        """
        ...
