"""
Fallback coordination across providers.
Calls the primary provider and, if it fails, the remaining configured
providers one at a time in priority order.
"""
from typing import Callable, List

from exceptions import AllProvidersExhaustedError, UpstreamError
from models.api_models import ChatSettings
from models.chat_models import (
    PROVIDER_PRIORITY,
    CanonicalMessage,
    FallbackOutcome,
    OrchestratorConfig,
    ProviderId,
)
from services.providers import ProviderAdapter, get_adapter
from utils.constants import FALLBACK_LABEL_SUFFIX
from utils.logger import app_logger


AdapterFactory = Callable[[ProviderId, OrchestratorConfig], ProviderAdapter]


class FallbackCoordinator:
    """Executes a request against the primary provider with sequential fallback."""

    def __init__(self, config: OrchestratorConfig, adapter_factory: AdapterFactory = get_adapter):
        self.config = config
        self.adapter_factory = adapter_factory

    def fallback_candidates(self, primary: ProviderId) -> List[ProviderId]:
        """Configured providers other than the primary, in priority order."""
        return [
            provider for provider in PROVIDER_PRIORITY
            if provider != primary and self.config.has_credential(provider)
        ]

    async def execute(self, primary: ProviderId, messages: List[CanonicalMessage], settings: ChatSettings) -> FallbackOutcome:
        """
        Call the primary provider, falling back on failure.

        Attempts are strictly sequential; a fallback call starts only after
        the previous attempt has failed.

        Raises:
            AllProvidersExhaustedError: Primary and every candidate failed
        """
        attempts: List[UpstreamError] = []

        adapter = self.adapter_factory(primary, self.config)
        try:
            result = await adapter.call(messages, settings)
            return FallbackOutcome(result=result, provider=primary, used_fallback=False, model_label=adapter.label)
        except UpstreamError as e:
            app_logger.error(f"Primary provider ({primary.value}) failed: {e}")
            attempts.append(e)

        for candidate in self.fallback_candidates(primary):
            adapter = self.adapter_factory(candidate, self.config)
            try:
                result = await adapter.call(messages, settings)
            except UpstreamError as e:
                app_logger.error(f"Fallback provider ({candidate.value}) also failed: {e}")
                attempts.append(e)
                continue

            app_logger.warning(f"Fallback to {candidate.value} succeeded after {primary.value} failed")
            return FallbackOutcome(
                result=result,
                provider=candidate,
                used_fallback=True,
                model_label=f"{adapter.label}{FALLBACK_LABEL_SUFFIX}"
            )

        raise AllProvidersExhaustedError(attempts)
