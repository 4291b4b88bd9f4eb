"""CamGPT - Photo analysis backend with an agentic web search flow.

FastAPI application entry point with lifespan management.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config import settings
from src.core.logging import setup_logging
from src.core.scheduler import start_scheduler, shutdown_scheduler
from src.llm import get_configured_llm
from src.services.image_agent import router as image_agent_router
from src.services.image_agent.tools import web_search_client

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown."""
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    settings.upload_path.mkdir(parents=True, exist_ok=True)

    if settings.llm_provider.lower() == "openai" and not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY environment variable not set!")
    if settings.llm_provider.lower() == "gemini" and not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY environment variable not set!")
    if not web_search_client.configured:
        logger.warning("TAVILY_API_KEY not set - web search will be disabled")
    else:
        logger.info("Tavily web search integration active")

    start_scheduler()
    yield
    # Shutdown
    logger.info("Shutting down...")
    shutdown_scheduler()
    await web_search_client.aclose()


app = FastAPI(
    title="CamGPT",
    description="Photo analysis backend - vision model answers enriched with live web search",
    version=VERSION,
    lifespan=lifespan,
)

# Include service routers
app.include_router(image_agent_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return every HTTP error in the {error, status} shape the client expects."""
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message, "status": "error"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with the standard error payload."""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "status": "error"},
    )


# Health check models
class ServicesStatus(BaseModel):
    """Connectivity of upstream dependencies."""

    llm: str
    web_search: str
    agent_service: str


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    timestamp: datetime
    services: ServicesStatus


@app.get("/")
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "name": settings.app_name,
        "version": VERSION,
        "description": "Photo analysis backend with agentic web search",
        "endpoints": ["/api/health", "/api/analyze-image", "/api/test-agent"],
    }


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health including model API and search API connectivity."""
    try:
        llm_connected = await get_configured_llm().check_health()
    except ValueError as e:
        logger.warning(f"LLM provider not usable: {e}")
        llm_connected = False

    web_search_status = await web_search_client.check_health()

    return HealthResponse(
        status="healthy" if llm_connected else "degraded",
        message=f"{settings.app_name} backend API is running",
        timestamp=datetime.now(timezone.utc),
        services=ServicesStatus(
            llm="connected" if llm_connected else "error",
            web_search=web_search_status,
            agent_service="operational" if llm_connected else "error",
        ),
    )
