"""
Chat service containing the request orchestration pipeline.
Handles validation, provider selection, prompt composition, provider calls
with fallback and response envelope construction.
"""
import time

from exceptions import AllProvidersExhaustedError, ChatValidationError
from models.api_models import ChatRequest, ChatResponse
from models.chat_models import ChatContext, OrchestratorConfig
from services.envelope import ResponseEnvelopeBuilder
from services.fallback import AdapterFactory, FallbackCoordinator
from services.prompt_composer import PromptComposer
from services.provider_selector import ProviderSelector
from services.providers import get_adapter
from services.usage_logger import UsageLogger
from utils.constants import ERROR_MODEL_LABEL, REQUEST_FAILED_MESSAGE
from utils.logger import app_logger


class ChatService:
    """Service for handling chat logic."""

    @staticmethod
    def validate_request(request: ChatRequest) -> str:
        """Return the trimmed message, rejecting empty input."""
        message = request.message.strip() if request.message else ""
        if not message:
            raise ChatValidationError()
        return message

    @staticmethod
    def prepare_context(request: ChatRequest, config: OrchestratorConfig) -> ChatContext:
        """
        Validate the request, select the primary provider and compose messages.

        The processing clock starts before provider selection.

        Raises:
            ChatValidationError: Empty message
            NoProviderAvailableError: AUTO selection with no configured provider
        """
        message = ChatService.validate_request(request)

        context = ChatContext(request=request, config=config, start_time=time.monotonic())
        context.selected_provider = ProviderSelector(config).select(request.settings)

        composer = PromptComposer(config.max_history_messages)
        context.messages = composer.compose(request.settings, request.history, message)

        app_logger.info(
            f"Chat request: provider={context.selected_provider.value}, "
            f"history={len(request.history)}, messages={len(context.messages)}"
        )
        return context

    @staticmethod
    async def process_chat(
        request: ChatRequest,
        config: OrchestratorConfig,
        usage_logger: UsageLogger | None = None,
        adapter_factory: AdapterFactory = get_adapter
    ) -> tuple[ChatResponse, int]:
        """
        Run the full chat pipeline.

        Returns:
            Tuple of (response envelope, HTTP status code)

        Raises:
            ChatValidationError: Empty message
            NoProviderAvailableError: AUTO selection with no configured provider
        """
        context = ChatService.prepare_context(request, config)
        envelope = ResponseEnvelopeBuilder(usage_logger)
        coordinator = FallbackCoordinator(config, adapter_factory)

        try:
            outcome = await coordinator.execute(context.selected_provider, context.messages, context.settings)
        except AllProvidersExhaustedError as e:
            app_logger.error(f"Chat failed: {e}")
            return envelope.degraded(context.selected_provider, context.start_time), 500

        response = envelope.build(
            outcome.result,
            context.selected_provider,
            outcome.model_label,
            context.start_time,
            outcome.used_fallback
        )
        app_logger.info(
            f"Chat completed by {outcome.provider.value} in {response.processing_time_ms}ms "
            f"({response.tokens} tokens, fallback={response.fallback_used})"
        )
        return response, 200

    @staticmethod
    def unavailable_response() -> ChatResponse:
        """Apology payload for requests that fail before any provider is called."""
        return ChatResponse(
            content=REQUEST_FAILED_MESSAGE,
            model=ERROR_MODEL_LABEL,
            tokens=0,
            processing_time_ms=0,
            fallback_used=True,
            provider=None
        )
