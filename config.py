"""
Configuration module for the AI chat orchestration service.
Handles environment variables and application settings.
"""
import os
from dotenv import load_dotenv
from models.chat_models import OrchestratorConfig, ProviderId, ProviderProfile

load_dotenv()


class Config:
    """Application configuration class."""

    # API Keys
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    TOGETHER_API_KEY: str = os.getenv("TOGETHER_API_KEY", "")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")

    # Provider endpoints
    GROQ_BASE_URL: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
    TOGETHER_BASE_URL: str = os.getenv("TOGETHER_BASE_URL", "https://api.together.xyz/v1")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")

    # Default models used when the request asks for "auto"
    GROQ_DEFAULT_MODEL: str = os.getenv("GROQ_DEFAULT_MODEL", "qwen-qwq-32b")
    TOGETHER_DEFAULT_MODEL: str = os.getenv("TOGETHER_DEFAULT_MODEL", "deepseek-ai/DeepSeek-R1-Distill-Llama-70B-free")
    GEMINI_DEFAULT_MODEL: str = os.getenv("GEMINI_DEFAULT_MODEL", "gemini-2.5-pro")

    # Human-readable model labels returned to the client
    GROQ_MODEL_LABEL: str = "Groq (Qwen-QwQ-32B)"
    TOGETHER_MODEL_LABEL: str = "Together AI (DeepSeek-R1)"
    GEMINI_MODEL_LABEL: str = "Google Gemini 2.5 Pro"

    # Usage analytics sink (stats webhook). Empty means log locally only.
    USAGE_LOG_URL: str = os.getenv("USAGE_LOG_URL", "")

    # Application Settings
    APP_TITLE: str = "Portfolio AI Assistant"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    MAX_HISTORY_MESSAGES: int = 6

    # Timeouts (in seconds)
    PROVIDER_TIMEOUT: float = float(os.getenv("PROVIDER_TIMEOUT", "30.0"))
    USAGE_LOG_TIMEOUT: float = 5.0
    HEALTH_PROBE_TIMEOUT: float = 10.0

    # Sampling threshold above which "auto" prefers the creative provider
    CREATIVE_TEMPERATURE_THRESHOLD: float = 1.5

    # Gemini extension: reasoning token budget when thinking is enabled
    GEMINI_THINKING_BUDGET: int = 10467

    @classmethod
    def orchestrator_config(cls) -> OrchestratorConfig:
        """
        Build the request orchestration configuration from current settings.
        Constructed once at startup and injected into request handlers.
        """
        profiles = {
            ProviderId.GROQ: ProviderProfile(
                provider=ProviderId.GROQ,
                api_key=cls.GROQ_API_KEY,
                base_url=cls.GROQ_BASE_URL,
                default_model=cls.GROQ_DEFAULT_MODEL,
                label=cls.GROQ_MODEL_LABEL,
            ),
            ProviderId.TOGETHER: ProviderProfile(
                provider=ProviderId.TOGETHER,
                api_key=cls.TOGETHER_API_KEY,
                base_url=cls.TOGETHER_BASE_URL,
                default_model=cls.TOGETHER_DEFAULT_MODEL,
                label=cls.TOGETHER_MODEL_LABEL,
            ),
            ProviderId.GEMINI: ProviderProfile(
                provider=ProviderId.GEMINI,
                api_key=cls.GEMINI_API_KEY,
                base_url=cls.GEMINI_BASE_URL,
                default_model=cls.GEMINI_DEFAULT_MODEL,
                label=cls.GEMINI_MODEL_LABEL,
            ),
        }

        return OrchestratorConfig(
            profiles=profiles,
            provider_timeout=cls.PROVIDER_TIMEOUT,
            usage_log_url=cls.USAGE_LOG_URL,
            usage_log_timeout=cls.USAGE_LOG_TIMEOUT,
            health_probe_timeout=cls.HEALTH_PROBE_TIMEOUT,
            max_history_messages=cls.MAX_HISTORY_MESSAGES,
            creative_temperature_threshold=cls.CREATIVE_TEMPERATURE_THRESHOLD,
            thinking_budget=cls.GEMINI_THINKING_BUDGET,
        )

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing API keys."""
        if not (cls.GROQ_API_KEY or cls.TOGETHER_API_KEY or cls.GEMINI_API_KEY):
            print("   WARNING: no provider API key found in .env file")
            print("   Set at least one of GROQ_API_KEY, TOGETHER_API_KEY or GEMINI_API_KEY to enable chat.")

        if not cls.USAGE_LOG_URL:
            print("   WARNING: USAGE_LOG_URL not set")
            print("   Usage statistics will only be written to the application log.")

Config.validate()
