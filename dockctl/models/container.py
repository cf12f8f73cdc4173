"""Container lifecycle models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ContainerStatus(str, Enum):
    """Container status as reported by the engine in ``State.Status``."""

    RUNNING = "running"
    PAUSED = "paused"
    RESTARTING = "restarting"
    EXITED = "exited"
    CREATED = "created"
    DEAD = "dead"
    REMOVING = "removing"

    @classmethod
    def parse(cls, value: Optional[str]) -> Union["ContainerStatus", str, None]:
        """Return the enum member for ``value``, or the raw value if unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return value


class EngineAction(str, Enum):
    """Engine commands issued by the deletion reconciler."""

    STOP = "stop"
    UNPAUSE = "unpause"
    REMOVE = "remove"
    FORCE_REMOVE = "force_remove"


@dataclass
class ReconciliationAttempt:
    """Per-request state of a single deletion."""

    container_id: str
    status: Union[ContainerStatus, str, None]
    retries_remaining: int = 5
    name: str = ""
    actions: List[EngineAction] = field(default_factory=list)
    polls: int = 0


class DeletionResult(BaseModel):
    """Confirmation returned after a container has been driven to removal."""

    message: str
    id: str
    name: str
    status: str = Field(..., description="Status observed before reconciliation")
    actions: List[EngineAction] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)


class RunContainerRequest(BaseModel):
    """Request model for ``POST /container/run``."""

    model_config = ConfigDict(populate_by_name=True)

    image: str = Field(..., alias="Image", description="Image to run")
    cmd: Optional[List[str]] = Field(
        default=None, alias="Cmd", description="Command overriding the image default"
    )
    tty: bool = Field(default=False, alias="Tty", description="Allocate a TTY")


class RunContainerResponse(BaseModel):
    """Result of running a container to completion."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="Id")
    status_code: Optional[int] = Field(default=None, alias="StatusCode")
    output: str = Field(default="", alias="Output")


class ExecRequest(BaseModel):
    """Request model for ``POST /container/run/{id}``."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., description="Code or command text appended to Cmd")
    cmd: List[str] = Field(
        default_factory=lambda: ["/bin/sh", "-c"],
        alias="Cmd",
        description="Invocation prefix; the code is passed as its final argument",
    )


class ExecResponse(BaseModel):
    """Captured exec stream."""

    output: str = ""
