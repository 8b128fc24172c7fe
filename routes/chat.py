"""
Route handlers for standard chat operations.
Handles the /api/ai/chat endpoint (non-streaming).
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from dependencies import get_orchestrator_config, get_usage_logger
from exceptions import ChatValidationError, NoProviderAvailableError
from models.api_models import ChatRequest
from models.chat_models import OrchestratorConfig
from services.chat_service import ChatService
from services.usage_logger import UsageLogger
from utils.logger import app_logger

router = APIRouter()


def send_unavailable_error() -> JSONResponse:
    """Apology payload for failures outside the provider fallback chain."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ChatService.unavailable_response().to_payload()
    )


@router.post("/api/ai/chat")
async def chat(
    request: ChatRequest,
    config: OrchestratorConfig = Depends(get_orchestrator_config),
    usage_logger: UsageLogger | None = Depends(get_usage_logger)
):
    """
    Chat endpoint with automatic provider selection and fallback.
    """
    try:
        response, status_code = await ChatService.process_chat(request, config, usage_logger)
        return JSONResponse(status_code=status_code, content=response.to_payload())

    except ChatValidationError as e:
        app_logger.warning(f"Rejected chat request: {e.message}")
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    except NoProviderAvailableError as e:
        app_logger.error(f"Chat error: {e.message}")
        return send_unavailable_error()
    except Exception as e:
        app_logger.error(f"Chat error: {str(e)}")
        return send_unavailable_error()
