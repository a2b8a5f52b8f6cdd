import logging
from typing import Any

from openai import APIError, AsyncOpenAI

from ...config import DEFAULT_MODEL, DEFAULT_TEMPERATURE, DEFAULT_TIMEOUT
from ...errors import GatewayError
from ...history.models import Message
from ...prompts import build_system_prompt
from ..base import CompletionGateway
from ..models import GatewayContext

logger = logging.getLogger(__name__)


def build_model_messages(messages: list[Message], context: GatewayContext) -> list[dict[str, Any]]:
    """Convert a conversation into chat-completions messages.

    Prepends the system prompt for the context's language and focus topic.
    An attached image is added to the last user message as an
    ``image_url`` content part.

    Returns:
        List of message dicts ready for the chat-completions API
    """
    model_messages: list[dict[str, Any]] = [{
        "role": "system",
        "content": build_system_prompt(context.language.display_name, context.focus_topic),
    }]
    model_messages.extend({"role": msg.role, "content": msg.content} for msg in messages)

    if context.image:
        last = model_messages[-1]
        parts: list[dict[str, Any]] = []
        if last["content"]:
            parts.append({"type": "text", "text": last["content"]})
        parts.append({"type": "image_url", "image_url": {"url": context.image}})
        last["content"] = parts

    return model_messages


class ModelGateway(CompletionGateway):
    """Gateway calling an OpenAI-compatible chat-completions endpoint directly.

    This is the completion function's own behavior: it owns the system
    prompt and asks the model for a JSON-object answer.

    Hidden design decisions:
    - OpenAI client initialization against any compatible base URL
    - System prompt construction and image attachment
    - Sampling temperature and response format
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT,
        **client_kwargs: Any
    ):
        """Initialize the model gateway.

        Args:
            api_key: API key for the completion endpoint
            model: Model identifier
            base_url: Optional OpenAI-compatible base URL
            temperature: Sampling temperature
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._temperature = temperature
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    async def send(self, messages: list[Message], context: GatewayContext) -> str:
        self.check_messages(messages)

        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=build_model_messages(messages, context),
                temperature=self._temperature,
                response_format={"type": "json_object"},
            )
        except APIError as e:
            logger.warning("AI gateway error: %s", e)
            status = getattr(e, "status_code", None)
            raise GatewayError("AI gateway error", status_code=status) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise GatewayError("AI gateway returned an empty completion")

        if completion.usage:
            logger.debug(
                "Completion used %s prompt / %s completion tokens",
                completion.usage.prompt_tokens,
                completion.usage.completion_tokens,
            )
        return content

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()
