"""
Provider selection for chat requests.
Resolves an explicit provider choice or applies the automatic selection rules.
"""
from dataclasses import dataclass
from typing import Callable, List, Sequence

from exceptions import NoProviderAvailableError
from models.api_models import ChatSettings, Provider
from models.chat_models import OrchestratorConfig, ProviderId
from utils.logger import app_logger


@dataclass(frozen=True)
class SelectionRule:
    """
    Picks `provider` when it is available and `applies(settings, config)` holds.
    Rules are evaluated in order; the first match wins.
    """
    name: str
    provider: ProviderId
    applies: Callable[[ChatSettings, OrchestratorConfig], bool]


DEFAULT_SELECTION_RULES: tuple = (
    # Best reasoning support
    SelectionRule(
        name="thinking",
        provider=ProviderId.GEMINI,
        applies=lambda settings, config: settings.enable_thinking,
    ),
    # Favors creative sampling
    SelectionRule(
        name="creative",
        provider=ProviderId.TOGETHER,
        applies=lambda settings, config: settings.temperature > config.creative_temperature_threshold,
    ),
    # Lowest latency default
    SelectionRule(
        name="default",
        provider=ProviderId.GROQ,
        applies=lambda settings, config: True,
    ),
)


class ProviderSelector:
    """Chooses the provider to try first for a request."""

    def __init__(self, config: OrchestratorConfig, rules: Sequence[SelectionRule] = DEFAULT_SELECTION_RULES):
        self.config = config
        self.rules = tuple(rules)

    def select(self, settings: ChatSettings, available: List[ProviderId] | None = None) -> ProviderId:
        """
        Select the primary provider.

        An explicit choice is returned as is, even without a credential; the
        missing key surfaces as a call failure. For AUTO, the rule table is
        applied over the providers that have credentials.

        Args:
            settings: Request settings
            available: Providers with credentials (defaults to the config's)

        Raises:
            NoProviderAvailableError: AUTO requested and no provider is configured
        """
        if settings.provider != Provider.AUTO:
            return ProviderId.from_provider(settings.provider)

        if available is None:
            available = self.config.available_providers()

        if not available:
            raise NoProviderAvailableError()

        for rule in self.rules:
            if rule.provider in available and rule.applies(settings, self.config):
                app_logger.info(f"Auto-selected provider '{rule.provider.value}' (rule: {rule.name})")
                return rule.provider

        app_logger.info(f"No selection rule matched, using first available provider '{available[0].value}'")
        return available[0]
