"""Ephemeral execution runner - runs a snippet in a throwaway container."""

from typing import Optional

import structlog

from ..config import settings
from ..config.languages import get_language
from ..models.errors import ContainerApiException, UnsupportedLanguageError
from ..models.execution import ExecutionResult
from .container.engine import ContainerEngine

logger = structlog.get_logger(__name__)

# Keeps the container alive until the exec has finished
IDLE_COMMAND = ["tail", "-f", "/dev/null"]


class EphemeralRunner:
    """Creates a container per snippet, execs the interpreter, then removes it."""

    def __init__(
        self,
        engine: ContainerEngine,
        pull_missing_images: Optional[bool] = None,
        stop_timeout: Optional[int] = None,
    ):
        """Initialize the runner.

        Args:
            engine: Container engine shared with the rest of the process
            pull_missing_images: Pull the language image when it is not local
            stop_timeout: Grace period in seconds when stopping during cleanup
        """
        self.engine = engine
        self.pull_missing_images = (
            settings.pull_missing_images
            if pull_missing_images is None
            else pull_missing_images
        )
        self.stop_timeout = (
            settings.runner_stop_timeout if stop_timeout is None else stop_timeout
        )

    async def run(self, language: str, code: str) -> ExecutionResult:
        """Execute ``code`` with the interpreter registered for ``language``.

        A non-zero or missing exit code is logged, not raised; the captured
        output already carries the error text.

        Raises:
            UnsupportedLanguageError: before any engine call, if the language
                has no execution environment.
            ContainerApiException: the image, create, start or exec step failed.
        """
        lang = get_language(language)
        if lang is None:
            raise UnsupportedLanguageError(language)

        image = settings.get_image_for_language(lang.code)
        command = lang.build_command(code)
        container_id: Optional[str] = None

        try:
            if self.pull_missing_images:
                await self.engine.ensure_image(image)

            logger.info("Creating container", image=image, language=lang.code)
            container_id = await self.engine.create_container(
                {
                    "Image": image,
                    "Cmd": IDLE_COMMAND,
                    "AttachStdout": True,
                    "AttachStderr": True,
                    "Tty": False,
                    "OpenStdin": False,
                }
            )

            await self.engine.start(container_id)
            logger.info("Container started", container_id=container_id[:12])

            logger.info(
                "Executing code",
                container_id=container_id[:12],
                interpreter=lang.interpreter[0],
                code_length=len(code),
            )
            exit_code, raw_output = await self.engine.exec_run(container_id, command)

            if exit_code != 0:
                logger.error(
                    "Code execution failed",
                    container_id=container_id[:12],
                    exit_code=exit_code,
                )

            return ExecutionResult(
                output=raw_output.decode("utf-8", errors="replace").strip(),
                exit_code=exit_code,
                language=lang.code,
                image=image,
                container_id=container_id,
            )

        except ContainerApiException as e:
            logger.error("Docker operation error", language=lang.code, error=e.message)
            raise

        finally:
            if container_id:
                await self._cleanup(container_id)

    async def _cleanup(self, container_id: str) -> None:
        """Stop (if running) and remove the container; failures are logged only."""
        try:
            info = await self.engine.inspect(container_id)
            if (info.get("State") or {}).get("Running"):
                logger.info("Stopping container", container_id=container_id[:12])
                await self.engine.stop(container_id, timeout=self.stop_timeout)
            await self.engine.remove(container_id)
            logger.info("Container removed", container_id=container_id[:12])
        except ContainerApiException as e:
            logger.warning(
                "Failed to clean up container",
                container_id=container_id[:12],
                error=e.message,
            )
