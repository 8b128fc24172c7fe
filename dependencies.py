"""
FastAPI dependencies for orchestration state injection.

Usage:
    @router.post("/endpoint")
    async def endpoint(config: OrchestratorConfig = Depends(get_orchestrator_config)):
        ...
"""
from fastapi import Request

from models.chat_models import OrchestratorConfig
from services.usage_logger import UsageLogger
from utils.logger import app_logger


def get_orchestrator_config(request: Request) -> OrchestratorConfig:
    """Orchestration configuration built at startup."""
    config = getattr(request.app.state, "orchestrator_config", None)
    if config is None:
        app_logger.error("Orchestrator configuration not initialized")
        raise RuntimeError("Orchestrator configuration not initialized")
    return config


def get_usage_logger(request: Request) -> UsageLogger | None:
    """Shared usage logger, or None when usage logging is disabled."""
    return getattr(request.app.state, "usage_logger", None)
