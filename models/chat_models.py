"""
Data models for chat orchestration.
Contains provider identifiers, canonical messages, provider results and the
request-scoped context passed through the pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from models.api_models import ChatRequest, Provider


class ProviderId(str, Enum):
    """Closed set of upstream LLM providers."""
    GROQ = "groq"
    TOGETHER = "together"
    GEMINI = "gemini"

    @classmethod
    def from_provider(cls, provider: Provider) -> "ProviderId":
        """Map an explicit client provider choice to its id. AUTO has no id."""
        if provider == Provider.AUTO:
            raise ValueError("AUTO must be resolved by the provider selector")
        return cls(provider.value)


# Fallback and "first available" order
PROVIDER_PRIORITY: tuple = (ProviderId.GROQ, ProviderId.TOGETHER, ProviderId.GEMINI)


class Role(str, Enum):
    """Canonical message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class CanonicalMessage:
    """Provider-agnostic chat message handed to every adapter."""
    role: Role
    content: str

    def as_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ProviderResult:
    """Normalized output of a provider adapter."""
    content: str
    tokens_used: int = 0
    raw: Any = None


@dataclass
class FallbackOutcome:
    """Result of the primary call or the fallback chain."""
    result: ProviderResult
    provider: ProviderId
    used_fallback: bool
    model_label: str


@dataclass(frozen=True)
class ProviderProfile:
    """Static per-provider settings: credential, endpoint, default model, display label."""
    provider: ProviderId
    api_key: str
    base_url: str
    default_model: str
    label: str

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class OrchestratorConfig:
    """
    Process-wide, read-only orchestration configuration.
    Built once at startup and injected into request handling.
    """
    profiles: Dict[ProviderId, ProviderProfile]
    provider_timeout: float = 30.0
    usage_log_url: str = ""
    usage_log_timeout: float = 5.0
    health_probe_timeout: float = 10.0
    max_history_messages: int = 6
    creative_temperature_threshold: float = 1.5
    thinking_budget: int = 10467

    def has_credential(self, provider: ProviderId) -> bool:
        """Credential presence check for a provider."""
        profile = self.profiles.get(provider)
        return profile is not None and profile.configured

    def available_providers(self) -> List[ProviderId]:
        """Providers with a configured credential, in priority order."""
        return [p for p in PROVIDER_PRIORITY if self.has_credential(p)]

    def profile(self, provider: ProviderId) -> ProviderProfile:
        return self.profiles[provider]


@dataclass
class UsageRecord:
    """Usage statistics for a single chat request."""
    provider: Optional[str]
    model: str
    tokens: int
    processing_time_ms: int
    fallback_used: bool
    success: bool

    def to_payload(self) -> dict:
        """Serialize with the stats endpoint field names."""
        return {
            "provider": self.provider,
            "model": self.model,
            "tokens": self.tokens,
            "processingTime": self.processing_time_ms,
            "fallbackUsed": self.fallback_used,
            "success": self.success,
        }


@dataclass
class ChatContext:
    """
    Context object containing all chat processing state.
    Provides centralized access to request-scoped data, eliminating parameter chaining.
    """
    request: ChatRequest
    config: OrchestratorConfig
    start_time: float
    messages: List[CanonicalMessage] = field(default_factory=list)
    selected_provider: Optional[ProviderId] = None

    @property
    def settings(self):
        """Get settings from request."""
        return self.request.settings
