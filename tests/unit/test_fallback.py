import pytest

from exceptions import AllProvidersExhaustedError
from models.api_models import ChatSettings
from models.chat_models import CanonicalMessage, ProviderId, Role
from services.fallback import FallbackCoordinator


MESSAGES = [CanonicalMessage(Role.SYSTEM, "sys"), CanonicalMessage(Role.USER, "hi")]


@pytest.mark.parametrize("primary, expected", [
    (ProviderId.GROQ, [ProviderId.TOGETHER, ProviderId.GEMINI]),
    (ProviderId.TOGETHER, [ProviderId.GROQ, ProviderId.GEMINI]),
    (ProviderId.GEMINI, [ProviderId.GROQ, ProviderId.TOGETHER]),
])
def test_fallback_candidates_follow_priority_order(orchestrator_config, primary, expected):
    """Given a primary provider, candidates should be the other configured providers in fixed order."""
    assert FallbackCoordinator(orchestrator_config).fallback_candidates(primary) == expected


def test_fallback_candidates_skip_unconfigured_providers(make_config):
    """Given a provider without credentials, it should never be a fallback candidate."""
    coordinator = FallbackCoordinator(make_config(together=False))
    assert coordinator.fallback_candidates(ProviderId.GEMINI) == [ProviderId.GROQ]


@pytest.mark.anyio
async def test_primary_success_does_not_fall_back(orchestrator_config, adapter_builder):
    """Given a healthy primary, execute should return its result without touching other providers."""
    factory = adapter_builder.set_response(ProviderId.GROQ, "primary answer", tokens=9).build()

    outcome = await FallbackCoordinator(orchestrator_config, factory).execute(ProviderId.GROQ, MESSAGES, ChatSettings())

    assert outcome.result.content == "primary answer"
    assert outcome.provider == ProviderId.GROQ
    assert outcome.used_fallback is False
    assert outcome.model_label == "Groq (Qwen-QwQ-32B)"
    assert adapter_builder.call_log == [ProviderId.GROQ]


@pytest.mark.anyio
async def test_primary_failure_uses_single_configured_fallback(make_config, adapter_builder):
    """Given a failing primary and exactly one other provider, execute should answer via fallback."""
    factory = (
        adapter_builder
        .set_failure(ProviderId.GROQ, status=500)
        .set_response(ProviderId.GEMINI, "gemini answer")
        .build()
    )
    coordinator = FallbackCoordinator(make_config(together=False), factory)

    outcome = await coordinator.execute(ProviderId.GROQ, MESSAGES, ChatSettings())

    assert outcome.provider == ProviderId.GEMINI
    assert outcome.used_fallback is True
    assert outcome.model_label == "Google Gemini 2.5 Pro - Fallback"
    assert adapter_builder.call_log == [ProviderId.GROQ, ProviderId.GEMINI]


@pytest.mark.anyio
async def test_fallback_stops_at_first_success(orchestrator_config, adapter_builder):
    """Given several candidates, execute should try them in order and stop at the first success."""
    factory = (
        adapter_builder
        .set_failure(ProviderId.GEMINI)
        .set_failure(ProviderId.GROQ, status=503)
        .set_response(ProviderId.TOGETHER, "together answer")
        .build()
    )

    outcome = await FallbackCoordinator(orchestrator_config, factory).execute(ProviderId.GEMINI, MESSAGES, ChatSettings())

    assert outcome.provider == ProviderId.TOGETHER
    assert outcome.model_label == "Together AI (DeepSeek-R1) - Fallback"
    assert adapter_builder.call_log == [ProviderId.GEMINI, ProviderId.GROQ, ProviderId.TOGETHER]


@pytest.mark.anyio
async def test_all_failures_raise_exhausted_with_attempts(orchestrator_config, adapter_builder):
    """Given every provider failing, execute should raise AllProvidersExhaustedError listing every attempt."""
    factory = (
        adapter_builder
        .set_failure(ProviderId.GROQ)
        .set_failure(ProviderId.TOGETHER)
        .set_failure(ProviderId.GEMINI)
        .build()
    )

    with pytest.raises(AllProvidersExhaustedError) as exc_info:
        await FallbackCoordinator(orchestrator_config, factory).execute(ProviderId.TOGETHER, MESSAGES, ChatSettings())

    assert [e.provider for e in exc_info.value.attempts] == ["together", "groq", "gemini"]
    assert adapter_builder.call_log == [ProviderId.TOGETHER, ProviderId.GROQ, ProviderId.GEMINI]


@pytest.mark.anyio
async def test_unconfigured_primary_with_no_fallbacks_is_exhausted(make_config, adapter_builder):
    """Given an explicit primary that fails and no other credentials, execute should be exhausted after one call."""
    factory = adapter_builder.set_failure(ProviderId.GROQ).build()
    coordinator = FallbackCoordinator(make_config(together=False, gemini=False), factory)

    with pytest.raises(AllProvidersExhaustedError):
        await coordinator.execute(ProviderId.GROQ, MESSAGES, ChatSettings())
    assert adapter_builder.call_log == [ProviderId.GROQ]
