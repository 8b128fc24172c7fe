"""
Route handlers for provider health reporting.
"""
from fastapi import APIRouter, Depends

from dependencies import get_orchestrator_config
from models.chat_models import OrchestratorConfig
from services.health_service import HealthService

router = APIRouter()


@router.get("/api/ai/health")
async def health(probe: bool = False, config: OrchestratorConfig = Depends(get_orchestrator_config)):
    """Provider availability; `?probe=true` also checks live connectivity."""
    return await HealthService.check(config, probe=probe)
