"""Deletion reconciler.

Drives a container to removal with the fewest destructive engine calls
consistent with its observed status:

    running          stop, remove
    paused           unpause, stop, remove
    restarting       poll until it leaves ``restarting`` (bounded), stop if
                     it came up ``running``, then remove
    exited, created  remove
    dead             force remove
    removing         nothing, another removal is in flight

The reconciler never changes container state itself. It only issues
commands to the engine and re-reads the status the engine reports.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from ..config import settings
from ..models.container import (
    ContainerStatus,
    DeletionResult,
    EngineAction,
    ReconciliationAttempt,
)
from ..models.errors import UnknownContainerStatusError
from .container.engine import ContainerEngine

logger = structlog.get_logger(__name__)


def _status_of(data: dict) -> Optional[str]:
    return (data.get("State") or {}).get("Status")


class DeletionReconciler:
    """Converges a single container to "removed"."""

    def __init__(
        self,
        engine: ContainerEngine,
        poll_interval: Optional[float] = None,
        max_retries: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.engine = engine
        self.poll_interval = (
            settings.delete_poll_interval if poll_interval is None else poll_interval
        )
        self.max_retries = settings.delete_max_retries if max_retries is None else max_retries
        self._sleep = sleep

    async def delete(self, container_id: str) -> DeletionResult:
        """Remove ``container_id``.

        Raises:
            ContainerNotFoundError: the container could not be inspected.
            UnknownContainerStatusError: the status has no deletion policy.
            ContainerApiException: any engine call failed; earlier steps are
                not rolled back.
        """
        data = await self.engine.inspect(container_id)
        raw_status = _status_of(data)

        attempt = ReconciliationAttempt(
            container_id=container_id,
            status=ContainerStatus.parse(raw_status),
            retries_remaining=self.max_retries,
            name=(data.get("Name") or "").lstrip("/"),
        )
        log = logger.bind(container_id=container_id[:12], status=raw_status)
        log.info("Reconciling container for deletion")

        status = attempt.status
        if status == ContainerStatus.RUNNING:
            await self._stop(attempt)
            await self._remove(attempt)

        elif status == ContainerStatus.PAUSED:
            await self._unpause(attempt)
            await self._stop(attempt)
            await self._remove(attempt)

        elif status == ContainerStatus.RESTARTING:
            await self._wait_out_restart(attempt)
            if attempt.status == ContainerStatus.RUNNING:
                await self._stop(attempt)
            elif attempt.status == ContainerStatus.RESTARTING:
                log.warning(
                    "Container still restarting after retries, removing anyway",
                    polls=attempt.polls,
                )
            await self._remove(attempt)

        elif status in (ContainerStatus.EXITED, ContainerStatus.CREATED):
            await self._remove(attempt)

        elif status == ContainerStatus.DEAD:
            await self._remove(attempt, force=True)

        elif status == ContainerStatus.REMOVING:
            log.info("Removal already in progress")

        else:
            log.warning("Unknown container status, no action taken")
            raise UnknownContainerStatusError(container_id, str(raw_status))

        log.info(
            "Container deleted",
            actions=[a.value for a in attempt.actions],
            polls=attempt.polls,
        )
        return DeletionResult(
            message=f"Container {attempt.name} whose container id is {container_id} deleted",
            id=container_id,
            name=attempt.name,
            status=str(raw_status),
            actions=attempt.actions,
        )

    async def _wait_out_restart(self, attempt: ReconciliationAttempt) -> None:
        """Re-inspect once per interval while the container keeps restarting."""
        while (
            attempt.status == ContainerStatus.RESTARTING
            and attempt.retries_remaining > 0
        ):
            await self._sleep(self.poll_interval)
            refreshed = await self.engine.inspect(attempt.container_id)
            observed = _status_of(refreshed)
            attempt.status = ContainerStatus.parse(observed)
            attempt.retries_remaining -= 1
            attempt.polls += 1
            logger.debug(
                "Polled restarting container",
                container_id=attempt.container_id[:12],
                status=observed,
                retries_remaining=attempt.retries_remaining,
            )

    async def _stop(self, attempt: ReconciliationAttempt) -> None:
        await self.engine.stop(attempt.container_id)
        attempt.actions.append(EngineAction.STOP)

    async def _unpause(self, attempt: ReconciliationAttempt) -> None:
        await self.engine.unpause(attempt.container_id)
        attempt.actions.append(EngineAction.UNPAUSE)

    async def _remove(self, attempt: ReconciliationAttempt, force: bool = False) -> None:
        await self.engine.remove(attempt.container_id, force=force)
        attempt.actions.append(EngineAction.FORCE_REMOVE if force else EngineAction.REMOVE)
