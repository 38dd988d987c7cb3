"""
Main FastAPI application for the Magnus assistant core

This module creates and configures the FastAPI application with:
- CORS middleware for frontend integration
- API routes (sessions, chat turns, Team-of-Experts streaming)
- Error mapping (configuration -> 503, unknown session -> 404)
- Health check endpoint
- Auto-generated API documentation
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from src.agents.assistant import get_assistant
from src.api.routes import chat, sessions
from src.api.schemas import HealthResponse
from src.config.settings import is_backend_configured, settings
from src.llm.client import log_provider_status
from src.utils.errors import ConfigurationError, SessionNotFoundError
from src.utils.logger import setup_logger

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events

    - Startup: configure logging, report backend status
    - Shutdown: wait for detached auto-title tasks
    """
    setup_logger()
    logger.info("🚀 FastAPI application starting...")
    logger.info("📚 API docs available at http://localhost:8000/docs")
    log_provider_status()
    if not is_backend_configured():
        logger.warning("⚠️  No generation backend configured - chat endpoints will return 503")

    yield

    logger.info("🛑 FastAPI application shutting down...")
    try:
        await get_assistant().drain_background_tasks()
        logger.info("✅ Background tasks finished")
    except Exception as e:
        logger.warning(f"Error while draining background tasks: {e}")


app = FastAPI(
    title=f"{settings.assistant_name} API",
    description="""
    Conversational assistant core.

    ## Features

    * **Intent routing** of free text to one of several handler pipelines
    * **Team of Experts** multi-agent runs streamed as Server-Sent Events (SSE)
    * **Structured results** (translations, locations, music concepts, study guides, actions)

    ## Example

    ```bash
    curl -X POST http://localhost:8000/api/sessions
    curl -X POST http://localhost:8000/api/sessions/<id>/messages \\
         -H "Content-Type: application/json" \\
         -d '{"message": "Ohayo in Japanese"}'
    ```
    """,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS Configuration
# In development, we allow requests from the frontend dev servers
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sessions.router)
app.include_router(chat.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint - API information
    """
    return {
        "service": f"{settings.assistant_name} API",
        "version": API_VERSION,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "sessions": "/api/sessions",
            "messages": "/api/sessions/{id}/messages",
            "experts_stream": "/api/sessions/{id}/experts/stream",
            "classify": "/api/classify",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """
    Health check endpoint

    Returns service status, name, version and whether a backend is configured.
    """
    return HealthResponse(
        status="healthy",
        service="magnus-assistant",
        version=API_VERSION,
        backend_configured=is_backend_configured(),
    )
