"""Liveness and health endpoints."""

import asyncio
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .._version import __version__
from ..dependencies.services import get_client_factory
from ..services.container.engine import ContainerEngine

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/", summary="Liveness check")
async def root():
    """Report that the server is up."""
    return {"working": True}


@router.get("/health", summary="Health check including the Docker engine")
async def health_check():
    """Ping the Docker engine on every call."""
    factory = get_client_factory()
    loop = asyncio.get_event_loop()

    # First use connects to the engine, which blocks
    client = await loop.run_in_executor(None, factory.get_client)
    if client is None:
        error = factory.get_initialization_error()
        docker_available = False
    else:
        docker_available = await ContainerEngine(client).ping()
        error = None if docker_available else "Docker engine did not answer ping"

    content = {
        "status": "healthy" if docker_available else "unhealthy",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "dockctl-api",
        "docker": {
            "available": docker_available,
            "error": error,
        },
    }

    if not docker_available:
        logger.warning("Health check failed", error=error)
        # Reconnect on the next request
        factory.reset_initialization()
        return JSONResponse(status_code=503, content=content)

    return content
