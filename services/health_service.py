"""
Health reporting for the AI providers.
"""
import asyncio
from datetime import datetime, timezone

from models.chat_models import PROVIDER_PRIORITY, OrchestratorConfig
from services.fallback import AdapterFactory
from services.providers import get_adapter
from utils.logger import app_logger


class HealthService:
    """Reports provider credential status and, optionally, live connectivity."""

    @staticmethod
    async def check(config: OrchestratorConfig, probe: bool = False, adapter_factory: AdapterFactory = get_adapter) -> dict:
        """
        Build the health payload.

        Args:
            config: Orchestration configuration
            probe: Also call each configured provider's models endpoint
            adapter_factory: Adapter constructor (injectable for tests)
        """
        providers = {p.value: config.has_credential(p) for p in PROVIDER_PRIORITY}
        active = sum(providers.values())

        health = {
            "status": "healthy" if active > 0 else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "providers": providers,
            "activeProviders": active,
            "totalProviders": len(providers),
        }

        if probe:
            health["connectivity"] = await HealthService._probe_providers(config, adapter_factory)

        return health

    @staticmethod
    async def _probe_providers(config: OrchestratorConfig, adapter_factory: AdapterFactory) -> dict:
        configured = config.available_providers()

        adapters = []
        for provider in configured:
            adapter = adapter_factory(provider, config)
            adapter.timeout = config.health_probe_timeout
            adapters.append(adapter)

        results = await asyncio.gather(*(a.probe() for a in adapters), return_exceptions=True)

        connectivity = {p.value: False for p in PROVIDER_PRIORITY}
        for provider, result in zip(configured, results):
            if isinstance(result, BaseException):
                app_logger.warning(f"Health probe for {provider.value} raised: {result}")
                continue
            connectivity[provider.value] = bool(result)

        return connectivity
