"""Provider factory functions for CLI.

Centralizes creation of gateways, storage and stores from environment variables.
Hides configuration details from command implementations.
"""

import os
from typing import Any

from rich.console import Console

from ..config import DEFAULT_MODEL
from ..gateway import CompletionGateway, create_gateway
from ..history import ConversationStore, create_conversation_store
from ..preferences import Preferences
from ..storage import KeyValueStorage, create_key_value_storage

# Default console for output
_console = Console()


def get_storage() -> KeyValueStorage:
    """Create local key-value storage from environment variables.

    Environment variables:
        HEALTHCHAT_DATA_PATH: Storage file (default: ~/.healthchat/storage.json)
    """
    path = os.getenv("HEALTHCHAT_DATA_PATH", "~/.healthchat/storage.json")
    return create_key_value_storage("file", path=path)


def get_store(storage: KeyValueStorage | None = None) -> ConversationStore:
    """Create the conversation store over local storage."""
    return create_conversation_store("local", storage=storage or get_storage())


def get_preferences(storage: KeyValueStorage | None = None) -> Preferences:
    """Create the preferences accessor over local storage."""
    return Preferences(storage or get_storage())


def _model_config() -> dict[str, Any] | None:
    api_key = os.getenv("AI_GATEWAY_API_KEY")
    if not api_key:
        return None
    return {
        "api_key": api_key,
        "model": os.getenv("AI_GATEWAY_MODEL", DEFAULT_MODEL),
        "base_url": os.getenv("AI_GATEWAY_BASE_URL") or None,
    }


def get_gateway(console: Console | None = None) -> CompletionGateway | None:
    """Create the completion gateway from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Gateway instance, or None if not configured

    Environment variables:
        HEALTHCHAT_GATEWAY: Gateway type (function, model; default: function)
        HEALTHCHAT_FUNCTION_URL: Completion function URL (for function gateway)
        HEALTHCHAT_FUNCTION_KEY: Key sent to the completion function
        AI_GATEWAY_API_KEY: API key (for model gateway)
        AI_GATEWAY_BASE_URL: OpenAI-compatible base URL (for model gateway)
        AI_GATEWAY_MODEL: Model name (default: google/gemini-2.5-flash)
    """
    con = console or _console
    kind = os.getenv("HEALTHCHAT_GATEWAY", "function").lower()

    if kind == "function":
        url = os.getenv("HEALTHCHAT_FUNCTION_URL")
        if not url:
            con.print("[yellow]Warning: HEALTHCHAT_FUNCTION_URL not set, chat disabled[/yellow]")
            return None
        return create_gateway("function", url=url, api_key=os.getenv("HEALTHCHAT_FUNCTION_KEY"))

    elif kind == "model":
        config = _model_config()
        if config is None:
            con.print("[yellow]Warning: AI_GATEWAY_API_KEY not set, chat disabled[/yellow]")
            return None
        return create_gateway("model", **config)

    else:
        con.print(f"[red]Error: Unknown gateway: {kind}[/red]")
        return None


def require_gateway(console: Console | None = None) -> CompletionGateway:
    """Get the gateway, raising error if not configured.

    Raises:
        SystemExit: If the gateway is not configured
    """
    import typer

    con = console or _console
    gateway = get_gateway(con)
    if not gateway:
        con.print("[red]Error: completion gateway not configured[/red]")
        raise typer.Exit(code=1)
    return gateway


def require_model_gateway(console: Console | None = None) -> CompletionGateway:
    """Create the model gateway the completion function serves.

    Raises:
        SystemExit: If AI_GATEWAY_API_KEY is not set
    """
    import typer

    con = console or _console
    config = _model_config()
    if config is None:
        con.print("[red]Error: AI_GATEWAY_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return create_gateway("model", **config)
