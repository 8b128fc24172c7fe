import httpx
import pytest
from unittest.mock import AsyncMock

from config import Config
from models.api_models import ChatRequest
from models.chat_models import OrchestratorConfig, ProviderId, ProviderProfile
from services.usage_logger import UsageLogger
from utils.http_client import HTTPClientManager


@pytest.fixture
def make_config():
    """Builds an OrchestratorConfig with fake credentials for the chosen providers."""
    def _make(groq=True, together=True, gemini=True, **overrides):
        profiles = {
            ProviderId.GROQ: ProviderProfile(
                provider=ProviderId.GROQ,
                api_key="test-groq-key" if groq else "",
                base_url="https://groq.test/openai/v1",
                default_model=Config.GROQ_DEFAULT_MODEL,
                label=Config.GROQ_MODEL_LABEL,
            ),
            ProviderId.TOGETHER: ProviderProfile(
                provider=ProviderId.TOGETHER,
                api_key="test-together-key" if together else "",
                base_url="https://together.test/v1",
                default_model=Config.TOGETHER_DEFAULT_MODEL,
                label=Config.TOGETHER_MODEL_LABEL,
            ),
            ProviderId.GEMINI: ProviderProfile(
                provider=ProviderId.GEMINI,
                api_key="test-gemini-key" if gemini else "",
                base_url="https://gemini.test/v1beta",
                default_model=Config.GEMINI_DEFAULT_MODEL,
                label=Config.GEMINI_MODEL_LABEL,
            ),
        }
        return OrchestratorConfig(profiles=profiles, **overrides)
    return _make


@pytest.fixture
def orchestrator_config(make_config):
    """Config with all three providers configured."""
    return make_config()


@pytest.fixture
def adapter_builder():
    from tests.fixtures.mock_clients import AdapterFactoryBuilder
    return AdapterFactoryBuilder()


@pytest.fixture
def chat_request():
    """Standard ChatRequest for testing."""
    return ChatRequest(
        message="Test message",
        settings={"provider": "groq", "enableThinking": False},
        history=[]
    )


@pytest.fixture
def usage_sink():
    return AsyncMock()


@pytest.fixture
def usage_logger(usage_sink):
    return UsageLogger(usage_sink, timeout=1.0)


@pytest.fixture
def mock_provider_http(monkeypatch):
    """
    Routes provider HTTP traffic to a handler.
    Usage: mock_provider_http(handler) where handler(request) -> httpx.Response.
    """
    def _install(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        monkeypatch.setattr(HTTPClientManager, "get_provider_client", lambda: client)
        return client
    return _install


@pytest.fixture
def app_factory(usage_logger):
    """Builds an app wired with the given orchestration config."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from routes import chat, chat_stream, health

    def _build(config):
        app = FastAPI()
        app.state.orchestrator_config = config
        app.state.usage_logger = usage_logger
        app.include_router(chat.router)
        app.include_router(chat_stream.router)
        app.include_router(health.router)
        return TestClient(app)
    return _build


@pytest.fixture
def configured_app(app_factory, orchestrator_config):
    """Pre-configured app with all three providers configured."""
    with app_factory(orchestrator_config) as client:
        yield client


@pytest.fixture
def anyio_backend():
    """The services are built on asyncio; run anyio tests on that backend only."""
    return "asyncio"
