"""Async façade over the Docker engine API.

Every method is a direct passthrough to the low-level Docker API client,
run in the default executor so the event loop is never blocked. Engine
errors are converted into typed API exceptions; nothing is retried.
"""

import asyncio
from typing import Any, Callable, Dict, List, NamedTuple, Optional

import docker
import structlog
from docker.errors import DockerException, NotFound
from docker.utils import parse_repository_tag
from requests.exceptions import ConnectionError as RequestsConnectionError

from ...models.errors import ContainerApiException, EngineError
from ...utils.error_handlers import handle_docker_error

logger = structlog.get_logger(__name__)


class ExecOutput(NamedTuple):
    """Result of a command run inside a container."""

    exit_code: Optional[int]
    output: bytes


class ContainerEngine:
    """Container lifecycle operations against a shared Docker client."""

    def __init__(self, client: docker.DockerClient):
        self.client = client

    @property
    def api(self) -> docker.APIClient:
        """Low-level API client returning raw engine payloads."""
        return self.client.api

    async def _call(
        self,
        operation: str,
        func: Callable[[], Any],
        container_id: Optional[str] = None,
    ) -> Any:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, func)
        except (DockerException, RequestsConnectionError) as e:
            logger.error(
                "Docker operation failed",
                operation=operation,
                container_id=container_id[:12] if container_id else None,
                error=str(e),
            )
            raise handle_docker_error(e, operation, container_id=container_id) from e

    async def ping(self) -> bool:
        """Check that the engine answers."""
        try:
            return bool(await self._call("ping", self.api.ping))
        except ContainerApiException:
            return False

    async def list_containers(self, all: bool = False) -> List[Dict[str, Any]]:
        """List container summaries; running containers only unless ``all``."""
        return await self._call("list", lambda: self.api.containers(all=all))

    async def create_container(self, spec: Dict[str, Any]) -> str:
        """Create a container from an engine creation spec and return its id.

        A ``name`` key is sent as the query parameter the engine expects
        rather than as part of the body.
        """
        config = dict(spec)
        # Neither spelling may stay in the body
        name = config.pop("name", None)
        upper_name = config.pop("Name", None)
        name = name or upper_name
        platform = config.pop("platform", None)
        result = await self._call(
            "create",
            lambda: self.api.create_container_from_config(
                config, name=name, platform=platform
            ),
        )
        for warning in result.get("Warnings") or []:
            logger.warning("Engine warning on create", warning=warning)
        return result["Id"]

    async def start(self, container_id: str) -> None:
        await self._call(
            "start", lambda: self.api.start(container_id), container_id=container_id
        )

    async def inspect(self, container_id: str) -> Dict[str, Any]:
        """Return the engine's inspect snapshot for a container."""
        return await self._call(
            "inspect",
            lambda: self.api.inspect_container(container_id),
            container_id=container_id,
        )

    async def exec_run(
        self, container_id: str, cmd: List[str], tty: bool = False
    ) -> ExecOutput:
        """Run ``cmd`` in a running container and capture its output.

        Without a TTY the engine multiplexes stdout and stderr; the frames
        are joined into one byte string in arrival order.
        """

        def _exec() -> ExecOutput:
            exec_instance = self.api.exec_create(
                container_id, cmd, stdout=True, stderr=True, tty=tty
            )
            exec_id = exec_instance["Id"]
            output = self.api.exec_start(exec_id, tty=tty, stream=False, demux=False)
            exec_info = self.api.exec_inspect(exec_id)
            return ExecOutput(exec_info.get("ExitCode"), output or b"")

        return await self._call("exec", _exec, container_id=container_id)

    async def stop(self, container_id: str, timeout: Optional[int] = None) -> None:
        await self._call(
            "stop",
            lambda: self.api.stop(container_id, timeout=timeout),
            container_id=container_id,
        )

    async def unpause(self, container_id: str) -> None:
        await self._call(
            "unpause", lambda: self.api.unpause(container_id), container_id=container_id
        )

    async def remove(self, container_id: str, force: bool = False) -> None:
        await self._call(
            "remove",
            lambda: self.api.remove_container(container_id, force=force),
            container_id=container_id,
        )

    async def wait(self, container_id: str) -> Dict[str, Any]:
        """Block until the container exits; returns ``{StatusCode, Error}``."""
        return await self._call(
            "wait", lambda: self.api.wait(container_id), container_id=container_id
        )

    async def logs(self, container_id: str) -> bytes:
        return await self._call(
            "logs",
            lambda: self.api.logs(container_id, stdout=True, stderr=True),
            container_id=container_id,
        )

    async def image_exists(self, image: str) -> bool:
        """Check whether an image is present locally."""

        def _exists() -> bool:
            try:
                self.api.inspect_image(image)
                return True
            except NotFound:
                return False

        return await self._call("inspect image", _exists)

    async def pull(self, image: str) -> None:
        """Pull an image, consuming the progress stream until it completes."""
        repository, tag = parse_repository_tag(image)

        def _pull() -> None:
            for event in self.api.pull(
                repository, tag=tag or "latest", stream=True, decode=True
            ):
                if "error" in event:
                    raise EngineError(
                        message=f"Failed to pull image {image}: {event['error']}"
                    )
                logger.debug(
                    "Pull progress",
                    image=image,
                    status=event.get("status"),
                    layer=event.get("id"),
                    progress=event.get("progress"),
                )

        logger.info("Pulling Docker image", image=image)
        await self._call("pull", _pull)
        logger.info("Successfully pulled image", image=image)

    async def ensure_image(self, image: str) -> None:
        """Pull ``image`` if it is not available locally."""
        if not await self.image_exists(image):
            await self.pull(image)
