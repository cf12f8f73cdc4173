"""Services for the container lifecycle API."""

from .container import ContainerEngine, DockerClientFactory
from .lifecycle import ContainerLifecycleService
from .reconciler import DeletionReconciler
from .runner import EphemeralRunner

__all__ = [
    "ContainerEngine",
    "DockerClientFactory",
    "ContainerLifecycleService",
    "DeletionReconciler",
    "EphemeralRunner",
]
