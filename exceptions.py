"""
Exception hierarchy for chat orchestration.

    OrchestrationError (base)
    ├── ChatValidationError (400)
    ├── NoProviderAvailableError (503)
    ├── UpstreamError (502)
    │   ├── ProviderTimeoutError (504)
    │   └── ProviderNotConfiguredError (502)
    ├── AllProvidersExhaustedError (503)
    └── UsageLoggingError (500)

Adapters raise UpstreamError; the fallback coordinator turns those into
further attempts and raises AllProvidersExhaustedError once nothing is left.
"""
from typing import List, Optional


class OrchestrationError(Exception):
    """Base exception for all orchestration errors."""

    default_message: str = "An error occurred"
    status_code: int = 500

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to a dictionary for API responses."""
        return {"error": self.message}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r})"


class ChatValidationError(OrchestrationError):
    """The inbound chat request is unusable (e.g. empty message)."""

    default_message = "Message is required"
    status_code = 400


class NoProviderAvailableError(OrchestrationError):
    """Automatic selection found no provider with a configured credential."""

    default_message = "No AI providers are configured"
    status_code = 503


class UpstreamError(OrchestrationError):
    """
    A provider HTTP call failed.

    Attributes:
        provider: Provider id value
        status: HTTP status code, None for transport failures
        body: Response body text or transport error description
    """

    status_code = 502

    def __init__(self, provider: str, status: Optional[int], body: str):
        self.provider = provider
        self.status = status
        self.body = body
        status_text = status if status is not None else "no response"
        super().__init__(f"{provider} API error: {status_text} - {body}")


class ProviderTimeoutError(UpstreamError):
    """The provider did not answer within the configured timeout."""

    status_code = 504

    def __init__(self, provider: str, timeout: float):
        self.timeout = timeout
        super().__init__(provider, None, f"timed out after {timeout}s")


class ProviderNotConfiguredError(UpstreamError):
    """The provider was requested but has no API key configured."""

    def __init__(self, provider: str):
        super().__init__(provider, None, "API key not configured")


class AllProvidersExhaustedError(OrchestrationError):
    """The primary provider and every fallback candidate failed."""

    default_message = "All AI providers failed"
    status_code = 503

    def __init__(self, attempts: Optional[List[UpstreamError]] = None):
        self.attempts = attempts or []
        tried = ", ".join(e.provider for e in self.attempts) or "none"
        super().__init__(f"{self.default_message} (tried: {tried})")


class UsageLoggingError(OrchestrationError):
    """Best-effort usage logging failed. Never propagated to callers."""

    default_message = "Failed to log usage"
