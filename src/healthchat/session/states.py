from enum import Enum


class TurnState(str, Enum):
    """Turn state of a conversation session."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
