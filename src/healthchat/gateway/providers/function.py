import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ...config import DEFAULT_TIMEOUT
from ...errors import GatewayError
from ...history.models import Message
from ..base import CompletionGateway
from ..models import GatewayContext, GatewayRequest, GatewayResponse

logger = logging.getLogger(__name__)


class FunctionGateway(CompletionGateway):
    """Gateway calling the hosted completion function over HTTP.

    Hidden design decisions:
    - Request body layout and header-based authentication
    - Envelope validation of the JSON reply
    - Translation of httpx failures into GatewayError
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        **client_kwargs: Any
    ):
        """Initialize the function gateway.

        Args:
            url: Full URL of the completion function
            api_key: Optional key sent as bearer token and ``apikey`` header
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for httpx.AsyncClient (e.g. transport)
        """
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
            headers["apikey"] = api_key

        self._url = url
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout, **client_kwargs)

    @property
    def url(self) -> str:
        return self._url

    async def send(self, messages: list[Message], context: GatewayContext) -> str:
        self.check_messages(messages)
        payload = GatewayRequest.build(messages, context).to_payload()

        try:
            response = await self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Completion function unreachable: %s", e)
            raise GatewayError(f"Completion function unreachable: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            detail = body.get("error") if isinstance(body, dict) else None
            logger.warning("Completion function returned %s: %s", response.status_code, detail)
            raise GatewayError(
                detail or f"Completion function returned {response.status_code}",
                status_code=response.status_code,
            )

        if isinstance(body, dict) and body.get("error"):
            raise GatewayError(str(body["error"]), status_code=response.status_code)

        try:
            envelope = GatewayResponse.model_validate(body)
        except ValidationError as e:
            raise GatewayError("Malformed response from completion function") from e

        return envelope.response

    async def close(self) -> None:
        await self._client.aclose()
