"""Dependencies package for the container lifecycle API."""

from .services import (
    get_client_factory,
    get_docker_client,
    get_container_engine,
    get_lifecycle_service,
    get_deletion_reconciler,
    get_ephemeral_runner,
    EngineDep,
    LifecycleServiceDep,
    ReconcilerDep,
    RunnerDep,
)

__all__ = [
    "get_client_factory",
    "get_docker_client",
    "get_container_engine",
    "get_lifecycle_service",
    "get_deletion_reconciler",
    "get_ephemeral_runner",
    "EngineDep",
    "LifecycleServiceDep",
    "ReconcilerDep",
    "RunnerDep",
]
