"""Exception types shared across healthchat modules."""


class HealthChatError(Exception):
    """Base class for all healthchat errors."""


class GatewayError(HealthChatError):
    """The completion gateway could not produce a response.

    Raised for transport failures, non-2xx responses, error bodies and
    malformed success envelopes. Callers treat it as retryable.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StoreAccessError(HealthChatError):
    """Local persistence is unavailable (unreadable, unwritable or full)."""
