"""Container lifecycle workflows behind the HTTP endpoints."""

from typing import Any, Dict, List, Optional

import structlog

from ..config import settings
from ..models.container import RunContainerRequest, RunContainerResponse
from ..models.errors import ImageNotFoundError
from .container.engine import ContainerEngine

logger = structlog.get_logger(__name__)


class ContainerLifecycleService:
    """Sequences engine calls for create, run and exec requests."""

    def __init__(self, engine: ContainerEngine, pull_missing_images: Optional[bool] = None):
        self.engine = engine
        self.pull_missing_images = (
            settings.pull_missing_images
            if pull_missing_images is None
            else pull_missing_images
        )

    async def list_containers(self, all: bool = False) -> List[Dict[str, Any]]:
        return await self.engine.list_containers(all=all)

    async def inspect(self, container_id: str) -> Dict[str, Any]:
        return await self.engine.inspect(container_id)

    async def create_and_start(self, spec: Dict[str, Any]) -> Dict[str, Any]:
        """Create a container from ``spec``, start it and return its inspect data."""
        container_id = await self._create(spec)
        await self.engine.start(container_id)
        logger.info("Container created and started", container_id=container_id[:12])
        return await self.engine.inspect(container_id)

    async def run(self, request: RunContainerRequest) -> RunContainerResponse:
        """Create and start a container, wait for it to exit, return its output."""
        spec: Dict[str, Any] = {
            "Image": request.image,
            "Tty": request.tty,
            "AttachStdout": True,
            "AttachStderr": True,
            "OpenStdin": False,
        }
        if request.cmd:
            spec["Cmd"] = request.cmd

        container_id = await self._create(spec)
        await self.engine.start(container_id)
        wait_result = await self.engine.wait(container_id)
        output = await self.engine.logs(container_id)

        status_code = wait_result.get("StatusCode")
        logger.info(
            "Container run completed",
            container_id=container_id[:12],
            image=request.image,
            status_code=status_code,
        )
        return RunContainerResponse(
            id=container_id,
            status_code=status_code,
            output=output.decode("utf-8", errors="replace"),
        )

    async def exec_code(self, container_id: str, code: str, cmd: List[str]) -> str:
        """Run ``[*cmd, code]`` inside a running container and return its output."""
        exit_code, output = await self.engine.exec_run(container_id, [*cmd, code])
        if exit_code != 0:
            logger.warning(
                "Exec exited with non-zero status",
                container_id=container_id[:12],
                exit_code=exit_code,
            )
        return output.decode("utf-8", errors="replace")

    async def _create(self, spec: Dict[str, Any]) -> str:
        try:
            return await self.engine.create_container(spec)
        except ImageNotFoundError:
            if not self.pull_missing_images or not spec.get("Image"):
                raise
            logger.info("Image missing, pulling before retry", image=spec["Image"])
            await self.engine.pull(spec["Image"])
            return await self.engine.create_container(spec)
