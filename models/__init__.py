"""
Models package exports.
"""
from models.api_models import ChatRequest, ChatResponse, ChatSettings, HistoryMessage, Provider
from models.chat_models import (
    CanonicalMessage,
    ChatContext,
    FallbackOutcome,
    OrchestratorConfig,
    ProviderId,
    ProviderProfile,
    ProviderResult,
    Role,
    UsageRecord,
)

__all__ = [
    'ChatRequest',
    'ChatResponse',
    'ChatSettings',
    'HistoryMessage',
    'Provider',
    'CanonicalMessage',
    'ChatContext',
    'FallbackOutcome',
    'OrchestratorConfig',
    'ProviderId',
    'ProviderProfile',
    'ProviderResult',
    'Role',
    'UsageRecord',
]
