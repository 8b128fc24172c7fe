"""
Response envelope construction.
Wraps provider output with timing, token usage and fallback metadata.
"""
import math
import time
from typing import Optional

from models.api_models import ChatResponse
from models.chat_models import ProviderId, ProviderResult, UsageRecord
from services.usage_logger import UsageLogger
from utils.constants import (
    ALL_PROVIDERS_FAILED_MESSAGE,
    CHARS_PER_TOKEN,
    ERROR_MODEL_LABEL,
)


def estimate_tokens(content: str) -> int:
    """Character-based token estimate used when a provider reports no usage."""
    return math.ceil(len(content) / CHARS_PER_TOKEN)


def elapsed_ms(start_time: float) -> int:
    """Milliseconds since `start_time` (a time.monotonic() reading)."""
    return int((time.monotonic() - start_time) * 1000)


class ResponseEnvelopeBuilder:
    """Builds ChatResponse envelopes and emits usage records for them."""

    def __init__(self, usage_logger: Optional[UsageLogger] = None):
        self.usage_logger = usage_logger

    def build(
        self,
        result: ProviderResult,
        provider: ProviderId,
        model_label: str,
        start_time: float,
        used_fallback: bool
    ) -> ChatResponse:
        """
        Build the success envelope.

        Args:
            result: Normalized provider output
            provider: Originally selected provider
            model_label: Label of the provider that answered, with fallback suffix if any
            start_time: Monotonic reading taken before provider selection
            used_fallback: Whether a fallback provider answered
        """
        tokens = result.tokens_used if result.tokens_used > 0 else estimate_tokens(result.content)

        response = ChatResponse(
            content=result.content,
            model=model_label,
            tokens=tokens,
            processing_time_ms=elapsed_ms(start_time),
            fallback_used=used_fallback,
            provider=provider.value
        )
        self._log(response, success=True)
        return response

    def degraded(self, provider: Optional[ProviderId], start_time: float) -> ChatResponse:
        """Build the apology envelope returned when every provider failed."""
        response = ChatResponse(
            content=ALL_PROVIDERS_FAILED_MESSAGE,
            model=ERROR_MODEL_LABEL,
            tokens=0,
            processing_time_ms=elapsed_ms(start_time),
            fallback_used=True,
            provider=provider.value if provider else None
        )
        self._log(response, success=False)
        return response

    def _log(self, response: ChatResponse, success: bool) -> None:
        if self.usage_logger is None:
            return

        self.usage_logger.log_usage(UsageRecord(
            provider=response.provider,
            model=response.model,
            tokens=response.tokens,
            processing_time_ms=response.processing_time_ms,
            fallback_used=response.fallback_used,
            success=success
        ))
