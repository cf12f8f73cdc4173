"""Main FastAPI application for the container lifecycle API."""

# Standard library imports
from contextlib import asynccontextmanager

# Third-party imports
import structlog
import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

# Local application imports
from ._version import __version__
from .api import containers, execute, health
from .config import settings
from .dependencies.services import get_client_factory
from .middleware import RequestLoggingMiddleware
from .models.errors import ContainerApiException
from .utils.error_handlers import (
    container_api_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .utils.logging import setup_logging
from .utils.shutdown import setup_graceful_shutdown, shutdown_handler


# Setup logging
setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        "Starting container lifecycle API",
        version=__version__,
        host=settings.api_host,
        port=settings.api_port,
    )

    setup_graceful_shutdown()

    if settings.api_debug:
        logger.warning("Debug mode is enabled - disable in production")

    # The engine may come up after the API; requests retry the connection
    factory = get_client_factory()
    if factory.is_available():
        logger.info("Docker engine reachable", base_url=settings.docker_base_url)
    else:
        logger.warning(
            "Docker engine not reachable at startup",
            base_url=settings.docker_base_url,
            error=factory.get_initialization_error(),
        )
        factory.reset_initialization()

    logger.info("Container lifecycle API startup completed")

    yield

    logger.info("Shutting down container lifecycle API")
    await shutdown_handler.shutdown()
    logger.info("Container lifecycle API shutdown completed")


app = FastAPI(
    title="Container Lifecycle API",
    description="Manage Docker containers over HTTP and run code snippets in throwaway containers",
    version=__version__,
    docs_url="/docs" if settings.enable_docs else None,
    redoc_url="/redoc" if settings.enable_docs else None,
    debug=settings.api_debug,
    lifespan=lifespan,
)

if settings.enable_access_logs:
    app.add_middleware(RequestLoggingMiddleware)

if settings.enable_cors:
    origins = settings.cors_origins if settings.cors_origins else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info("CORS enabled", origins=origins)

# Register global error handlers
app.add_exception_handler(ContainerApiException, container_api_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(health.router, tags=["health"])
app.include_router(containers.router, tags=["containers"])
app.include_router(execute.router, tags=["execute"])


def run_server():
    logger.info(f"Starting HTTP server on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        "dockctl.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
