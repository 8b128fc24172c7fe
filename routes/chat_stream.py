"""
Route handlers for streaming chat operations.
Handles the /api/ai/stream endpoint.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from dependencies import get_orchestrator_config, get_usage_logger
from exceptions import ChatValidationError, NoProviderAvailableError
from models.api_models import ChatRequest
from models.chat_models import OrchestratorConfig
from routes.chat import send_unavailable_error
from services.chat_service import ChatService
from services.stream_service import StreamService
from services.usage_logger import UsageLogger
from utils.constants import SSE
from utils.logger import app_logger

router = APIRouter()


@router.post("/api/ai/stream")
async def chat_stream(
    request: ChatRequest,
    config: OrchestratorConfig = Depends(get_orchestrator_config),
    usage_logger: UsageLogger | None = Depends(get_usage_logger)
):
    """
    Streaming chat endpoint. Emits `data:` frames with content chunks and a
    final `data: [DONE]`.
    """
    try:
        context = ChatService.prepare_context(request, config)
    except ChatValidationError as e:
        app_logger.warning(f"Rejected stream request: {e.message}")
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    except NoProviderAvailableError as e:
        app_logger.error(f"Stream error: {e.message}")
        return send_unavailable_error()

    return StreamingResponse(
        StreamService.stream_chat(context, usage_logger),
        media_type=SSE.MEDIA_TYPE,
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"}
    )
