"""Service dependency injection for the container lifecycle API.

One Docker client is shared by the whole process; every service receives
it explicitly through the engine.
"""

# Standard library imports
from functools import lru_cache
from typing import Annotated

# Third-party imports
import docker
import structlog
from fastapi import Depends

# Local application imports
from ..models.errors import EngineUnavailableError
from ..services import (
    ContainerEngine,
    ContainerLifecycleService,
    DeletionReconciler,
    DockerClientFactory,
    EphemeralRunner,
)

logger = structlog.get_logger(__name__)


@lru_cache()
def get_client_factory() -> DockerClientFactory:
    """Get the process-wide Docker client factory."""
    return DockerClientFactory()


def get_docker_client() -> docker.DockerClient:
    """Get the shared Docker client, failing the request if the engine is down."""
    factory = get_client_factory()
    client = factory.get_client()
    if client is None:
        error = factory.get_initialization_error()
        # Allow the next request to retry the connection
        factory.reset_initialization()
        raise EngineUnavailableError(
            message=f"Docker engine is currently unavailable: {error}"
        )
    return client


def get_container_engine(
    client: Annotated[docker.DockerClient, Depends(get_docker_client)],
) -> ContainerEngine:
    """Get the container engine bound to the shared client."""
    return ContainerEngine(client)


def get_lifecycle_service(
    engine: Annotated[ContainerEngine, Depends(get_container_engine)],
) -> ContainerLifecycleService:
    return ContainerLifecycleService(engine)


def get_deletion_reconciler(
    engine: Annotated[ContainerEngine, Depends(get_container_engine)],
) -> DeletionReconciler:
    return DeletionReconciler(engine)


def get_ephemeral_runner(
    engine: Annotated[ContainerEngine, Depends(get_container_engine)],
) -> EphemeralRunner:
    return EphemeralRunner(engine)


# Type aliases for dependency injection
EngineDep = Annotated[ContainerEngine, Depends(get_container_engine)]
LifecycleServiceDep = Annotated[
    ContainerLifecycleService, Depends(get_lifecycle_service)
]
ReconcilerDep = Annotated[DeletionReconciler, Depends(get_deletion_reconciler)]
RunnerDep = Annotated[EphemeralRunner, Depends(get_ephemeral_runner)]
