import pytest

from exceptions import NoProviderAvailableError
from models.api_models import ChatSettings
from models.chat_models import ProviderId
from services.provider_selector import ProviderSelector, SelectionRule


def settings(**kwargs):
    return ChatSettings(**kwargs)


@pytest.mark.parametrize("provider, expected", [
    ("groq", ProviderId.GROQ),
    ("together", ProviderId.TOGETHER),
    ("gemini", ProviderId.GEMINI),
])
def test_explicit_provider_is_returned_even_without_credential(make_config, provider, expected):
    """Given an explicit provider with no configured key, select should still return it."""
    selector = ProviderSelector(make_config(groq=False, together=False, gemini=False))
    assert selector.select(settings(provider=provider)) == expected


def test_auto_without_any_credential_raises(make_config):
    """Given AUTO and no credentials, select should raise NoProviderAvailableError."""
    selector = ProviderSelector(make_config(groq=False, together=False, gemini=False))
    with pytest.raises(NoProviderAvailableError):
        selector.select(settings(provider="auto"))


@pytest.mark.parametrize("temperature", [0.0, 0.5, 1.8, 2.0])
def test_auto_with_thinking_prefers_gemini(orchestrator_config, temperature):
    """Given all providers and thinking enabled, AUTO should always select Gemini."""
    selector = ProviderSelector(orchestrator_config)
    chosen = selector.select(settings(provider="auto", enable_thinking=True, temperature=temperature))
    assert chosen == ProviderId.GEMINI


def test_auto_with_high_temperature_prefers_together(orchestrator_config):
    """Given thinking off and temperature above 1.5, AUTO should select Together."""
    selector = ProviderSelector(orchestrator_config)
    assert selector.select(settings(provider="auto", enable_thinking=False, temperature=1.8)) == ProviderId.TOGETHER


def test_auto_temperature_threshold_is_exclusive(orchestrator_config):
    """Given temperature exactly 1.5, the creative rule should not apply."""
    selector = ProviderSelector(orchestrator_config)
    assert selector.select(settings(provider="auto", enable_thinking=False, temperature=1.5)) == ProviderId.GROQ


def test_auto_default_prefers_groq(orchestrator_config):
    """Given thinking off and a normal temperature, AUTO should select Groq."""
    selector = ProviderSelector(orchestrator_config)
    assert selector.select(settings(provider="auto", enable_thinking=False, temperature=0.5)) == ProviderId.GROQ


def test_auto_thinking_without_gemini_falls_through_to_groq(make_config):
    """Given thinking on but no Gemini key, the next matching rule should win."""
    selector = ProviderSelector(make_config(gemini=False))
    assert selector.select(settings(provider="auto", enable_thinking=True, temperature=0.5)) == ProviderId.GROQ


@pytest.mark.parametrize("config_kwargs, expected", [
    ({"groq": False, "together": True, "gemini": False}, ProviderId.TOGETHER),
    ({"groq": False, "together": False, "gemini": True}, ProviderId.GEMINI),
    ({"groq": False, "together": True, "gemini": True}, ProviderId.TOGETHER),
])
def test_auto_with_no_matching_rule_returns_first_available(make_config, config_kwargs, expected):
    """Given no rule matches, AUTO should return the first available provider in priority order."""
    selector = ProviderSelector(make_config(**config_kwargs))
    chosen = selector.select(settings(provider="auto", enable_thinking=False, temperature=0.5))
    assert chosen == expected


def test_explicit_available_list_overrides_config(orchestrator_config):
    """Given an explicit availability list, select should only consider those providers."""
    selector = ProviderSelector(orchestrator_config)
    chosen = selector.select(settings(provider="auto", enable_thinking=True), available=[ProviderId.TOGETHER])
    assert chosen == ProviderId.TOGETHER


def test_custom_rule_table_is_applied_in_order(orchestrator_config):
    """Given a custom rule table, select should use it instead of the default heuristic."""
    rules = [
        SelectionRule(name="search", provider=ProviderId.GEMINI, applies=lambda s, c: s.enable_search),
        SelectionRule(name="fallback", provider=ProviderId.TOGETHER, applies=lambda s, c: True),
    ]
    selector = ProviderSelector(orchestrator_config, rules=rules)

    assert selector.select(settings(provider="auto", enable_search=True)) == ProviderId.GEMINI
    assert selector.select(settings(provider="auto", enable_search=False)) == ProviderId.TOGETHER
