from typing import Any

from .base import CompletionGateway
from .providers import FunctionGateway, ModelGateway


def create_gateway(kind: str, **config: Any) -> CompletionGateway:
    """Create a completion gateway instance.

    This factory function hides the instantiation logic for different gateways.

    Args:
        kind: Gateway type ('function', 'model')
        **config: Gateway-specific configuration
            For function:
                - url: str (required)
                - api_key: str | None
                - timeout: float (default: 60.0)
            For model:
                - api_key: str (required)
                - model: str (default: 'google/gemini-2.5-flash')
                - base_url: str | None
                - temperature: float (default: 0.3)

    Returns:
        Initialized completion gateway

    Raises:
        ValueError: If gateway type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> gateway = create_gateway(
        ...     "function",
        ...     url="https://example.supabase.co/functions/v1/health-chat",
        ...     api_key="anon-key"
        ... )
    """
    kind_lower = kind.lower()

    if kind_lower == "function":
        if "url" not in config:
            raise TypeError("Function gateway requires 'url' in config")
        return FunctionGateway(**config)

    if kind_lower == "model":
        if "api_key" not in config:
            raise TypeError("Model gateway requires 'api_key' in config")
        return ModelGateway(**config)

    raise ValueError(
        f"Unsupported gateway: {kind}. "
        f"Supported gateways: 'function', 'model'"
    )
