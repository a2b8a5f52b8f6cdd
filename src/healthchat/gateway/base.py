from abc import ABC, abstractmethod
from typing import Any

from ..history.models import Message
from .models import GatewayContext


class CompletionGateway(ABC):
    """Abstract base class for completion gateways.

    This module hides the design decision of where completions come from.
    Implementations must handle:
    - Transport setup and authentication
    - Request/response format conversion
    - Mapping every failure onto GatewayError

    A gateway makes exactly one attempt per call and never touches
    conversation history.

    Supports async context manager protocol for proper resource cleanup:
        async with gateway:
            text = await gateway.send(messages, context)
    """

    @abstractmethod
    async def send(self, messages: list[Message], context: GatewayContext) -> str:
        """Send the conversation and return the raw assistant text.

        Args:
            messages: Conversation so far, ending with the newest user message
            context: Focus topic, response language and optional image

        Returns:
            Raw assistant text (plain text or a serialized structured answer)

        Raises:
            ValueError: If messages do not end with a user message
            GatewayError: On transport failure, error status or malformed response
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    @staticmethod
    def check_messages(messages: list[Message]) -> None:
        """Validate the input constraint shared by every gateway."""
        if not messages or messages[-1].role != "user":
            raise ValueError("Conversation must end with a user message")

    async def __aenter__(self) -> "CompletionGateway":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
