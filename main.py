"""
Portfolio AI Assistant - FastAPI application for the multi-provider chat assistant.
Selects between Groq, Together AI and Gemini, falls back across them on failure
and reports usage statistics to the dashboard.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config import Config
from routes import chat, chat_stream, health
from services.usage_logger import UsageLogger
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    orchestrator_config = Config.orchestrator_config()
    app.state.orchestrator_config = orchestrator_config
    app.state.usage_logger = UsageLogger.from_config(orchestrator_config)

    configured = [p.value for p in orchestrator_config.available_providers()]
    app_logger.info(f"Configured providers: {', '.join(configured) or 'none'}")

    yield

    await app.state.usage_logger.drain()
    await HTTPClientManager.close_all()

app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with user-friendly messages"""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url}: {errors}")

    if errors:
        first_error = errors[0]
        error_type = first_error.get('type', '')
        loc = first_error.get('loc', [])
        field = loc[-1] if loc else 'field'

        if error_type in ('greater_than', 'greater_than_equal', 'less_than', 'less_than_equal'):
            limit = next(iter(first_error.get('ctx', {}).values()), 'unknown')
            message = f"Field '{field}' is out of range (limit: {limit}, got: {first_error.get('input')})"
        else:
            message = f"{field}: {first_error.get('msg', 'Validation error')}"

        return JSONResponse(
            status_code=422,
            content={
                "detail": [{
                    "msg": message,
                    "type": error_type,
                    "loc": list(loc)
                }]
            },
        )

    return JSONResponse(
        status_code=422,
        content={"detail": errors},
    )


#root endpoint
@app.get("/")
async def root():
    """Root endpoint - liveness check."""
    return {"message": "Portfolio AI Assistant is running"}

app.include_router(chat.router, tags=["chat"])
app.include_router(chat_stream.router, tags=["chat"])
app.include_router(health.router, tags=["health"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
