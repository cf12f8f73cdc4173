"""Container lifecycle endpoints.

Thin routes over the lifecycle service and deletion reconciler. Engine
failures surface as typed exceptions and are rendered by the global error
handlers.
"""

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Body, Query

from ..dependencies.services import LifecycleServiceDep, ReconcilerDep
from ..models import (
    DeletionResult,
    ExecRequest,
    ExecResponse,
    RunContainerRequest,
    RunContainerResponse,
)
from ..utils.error_handlers import create_validation_error

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/container")


@router.get("/list")
async def list_containers(
    lifecycle: LifecycleServiceDep,
    all: bool = Query(False, description="Include stopped containers"),
) -> List[Dict[str, Any]]:
    """List container summaries (running containers unless ``all`` is set)."""
    return await lifecycle.list_containers(all=all)


@router.post("/create")
async def create_container(
    lifecycle: LifecycleServiceDep,
    spec: Dict[str, Any] = Body(..., description="Engine container-creation spec"),
) -> Dict[str, Any]:
    """Create and start a container, returning its inspect data."""
    if not spec.get("Image"):
        raise create_validation_error("Image", "An image is required", code="missing")

    logger.info("Create container request", image=spec["Image"])
    return await lifecycle.create_and_start(spec)


@router.post(
    "/run", response_model=RunContainerResponse, response_model_by_alias=True
)
async def run_container(
    request: RunContainerRequest, lifecycle: LifecycleServiceDep
) -> RunContainerResponse:
    """Run a container to completion and return its exit status and output."""
    logger.info("Run container request", image=request.image, tty=request.tty)
    return await lifecycle.run(request)


@router.post("/run/{container_id}", response_model=ExecResponse)
async def exec_in_container(
    container_id: str, request: ExecRequest, lifecycle: LifecycleServiceDep
) -> ExecResponse:
    """Exec code inside a running container and return the captured output."""
    logger.info(
        "Exec request",
        container_id=container_id[:12],
        cmd=request.cmd,
        code_length=len(request.code),
    )
    output = await lifecycle.exec_code(container_id, request.code, request.cmd)
    return ExecResponse(output=output)


@router.get("/{container_id}")
async def inspect_container(
    container_id: str, lifecycle: LifecycleServiceDep
) -> Dict[str, Any]:
    """Return the engine's inspect data for a container."""
    return await lifecycle.inspect(container_id)


@router.delete("/{container_id}", response_model=DeletionResult)
async def delete_container(
    container_id: str, reconciler: ReconcilerDep
) -> DeletionResult:
    """Drive a container to removal according to its current status."""
    return await reconciler.delete(container_id)
