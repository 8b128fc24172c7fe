"""
Streaming service for chat responses.
Streams provider output as server-sent events terminated by a [DONE] sentinel.
"""
import json
from typing import AsyncIterator

from exceptions import UpstreamError
from models.chat_models import ChatContext, UsageRecord
from services.envelope import elapsed_ms, estimate_tokens
from services.fallback import AdapterFactory, FallbackCoordinator
from services.providers import get_adapter
from services.usage_logger import UsageLogger
from utils.constants import ALL_PROVIDERS_FAILED_MESSAGE, FALLBACK_LABEL_SUFFIX, SSE
from utils.logger import app_logger


class StreamService:
    """Service for handling streaming chat operations."""

    @staticmethod
    def send_sse_data(data: dict) -> str:
        """Format a payload as a Server-Sent Events data frame."""
        return f"data: {json.dumps(data, ensure_ascii=False, separators=(',', ':'))}\n\n"

    @staticmethod
    def send_done() -> str:
        """Terminating sentinel frame."""
        return f"data: {SSE.DONE_SENTINEL}\n\n"

    @staticmethod
    async def stream_chat(
        context: ChatContext,
        usage_logger: UsageLogger | None = None,
        adapter_factory: AdapterFactory = get_adapter
    ) -> AsyncIterator[str]:
        """
        Stream the response for a prepared chat context.

        A provider failing before its first chunk is replaced by the next
        fallback candidate. Once text has been sent, a failure ends the stream
        with an error frame since partial output cannot be retracted.

        Yields:
            SSE frames: content chunks, optional error, then [DONE]
        """
        primary = context.selected_provider
        coordinator = FallbackCoordinator(context.config, adapter_factory)
        candidates = [primary] + coordinator.fallback_candidates(primary)

        for provider in candidates:
            adapter = adapter_factory(provider, context.config)
            used_fallback = provider != primary
            chunks = []

            try:
                async for chunk in adapter.stream(context.messages, context.settings):
                    chunks.append(chunk)
                    yield StreamService.send_sse_data({"content": chunk})
            except UpstreamError as e:
                if chunks:
                    app_logger.error(f"Stream from {provider.value} broke after {len(chunks)} chunks: {e}")
                    yield StreamService.send_sse_data({"error": ALL_PROVIDERS_FAILED_MESSAGE})
                    yield StreamService.send_done()
                    return

                app_logger.error(f"Streaming provider ({provider.value}) failed: {e}")
                continue

            label = adapter.label + (FALLBACK_LABEL_SUFFIX if used_fallback else "")
            StreamService._log_usage(usage_logger, context, label, "".join(chunks), used_fallback)
            yield StreamService.send_done()
            return

        app_logger.error("Streaming failed: all providers exhausted")
        yield StreamService.send_sse_data({"error": ALL_PROVIDERS_FAILED_MESSAGE})
        yield StreamService.send_done()

    @staticmethod
    def _log_usage(usage_logger: UsageLogger | None, context: ChatContext, label: str, content: str, used_fallback: bool) -> None:
        if usage_logger is None:
            return

        usage_logger.log_usage(UsageRecord(
            provider=context.selected_provider.value,
            model=label,
            tokens=estimate_tokens(content),
            processing_time_ms=elapsed_ms(context.start_time),
            fallback_used=used_fallback,
            success=True
        ))
