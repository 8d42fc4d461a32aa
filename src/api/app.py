"""
Main FastAPI application for the Multi-Assistant Audit Chat service

This module creates and configures the FastAPI application with:
- Permissive CORS for the browser client
- Assistant routes (chat, health, threads)
- Global health check endpoint
- Error translation from service errors to JSON responses
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger

from src.api.routes import assistants, health
from src.assistants.bootstrap import build_registry
from src.assistants.registry import AssistantRegistry
from src.config.settings import Settings, settings as default_settings
from src.utils.errors import AssistantServiceError, ValidationError
from src.utils.logger import setup_logger


SERVICE_NAME = "Multi-Assistant Audit Chat API"
SERVICE_VERSION = "1.0.0"

# Body fields whose validation failure is reported as missing
REQUIRED_FIELD_MESSAGES = {
    "message": "Message is required",
    "sessionId": "Session ID is required",
    "session_id": "Session ID is required",
}
INVALID_BODY_MESSAGE = "Invalid request body"


def validation_error_message(exc: RequestValidationError) -> str:
    """Error text for a request body that failed parsing or validation."""
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc and loc[-1] in REQUIRED_FIELD_MESSAGES:
            return REQUIRED_FIELD_MESSAGES[loc[-1]]
    return INVALID_BODY_MESSAGE


def create_app(
    registry: Optional[AssistantRegistry] = None,
    config: Settings = default_settings,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        registry: Pre-built assistant registry; built at startup when omitted
        config: Application settings

    Returns:
        Configured FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"🚀 {SERVICE_NAME} starting...")
        if getattr(app.state, "registry", None) is None:
            app.state.registry = await build_registry(config)

        for handle in app.state.registry:
            status = "✅" if handle.configured else "⚠️  not configured"
            logger.info(f"   - {handle.name} ({handle.key}) {status}")

        yield

        # Shutdown
        logger.info(f"🛑 {SERVICE_NAME} shutting down...")

    app = FastAPI(
        title=SERVICE_NAME,
        description="""
    Multi-turn chat with configured OpenAI assistants.

    ## Usage

    ```bash
    curl -X POST http://localhost:3000/api/assistants/sox-auditor/chat \\
         -H "Content-Type: application/json" \\
         -d '{"message": "Audit u1001 and u1002", "sessionId": "session-123"}'
    ```
    """,
        version=SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = config
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(AssistantServiceError)
    async def service_error_handler(request: Request, exc: AssistantServiceError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = validation_error_message(exc)
        logger.warning(f"Rejected request to {request.url.path}: {message}")
        return JSONResponse(status_code=ValidationError.status_code, content={"error": message})

    app.include_router(assistants.router)
    app.include_router(health.router)

    @app.options("/{path:path}", include_in_schema=False)
    async def preflight(path: str):
        """CORS preflight without Origin headers still gets a plain 200"""
        return Response(status_code=200)

    @app.get("/", tags=["root"])
    async def root():
        """
        Root endpoint - API information
        """
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/api/health",
                "assistants": "/api/assistants",
                "chat": "/api/assistants/{name}/chat",
            },
        }

    return app


setup_logger(default_settings.log_level)

# Create FastAPI application
app = create_app()
