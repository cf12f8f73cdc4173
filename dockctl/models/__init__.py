"""Data models for the container lifecycle API."""

from .container import (
    ContainerStatus,
    EngineAction,
    ReconciliationAttempt,
    DeletionResult,
    RunContainerRequest,
    RunContainerResponse,
    ExecRequest,
    ExecResponse,
)
from .execution import ExecuteCodeRequest, ExecutionResult
from .errors import (
    ErrorType,
    ErrorDetail,
    ErrorResponse,
    ContainerApiException,
    ValidationError,
    ResourceNotFoundError,
    ContainerNotFoundError,
    ImageNotFoundError,
    ResourceConflictError,
    UnknownContainerStatusError,
    UnsupportedLanguageError,
    EngineUnavailableError,
    EngineError,
)

__all__ = [
    # Container models
    "ContainerStatus",
    "EngineAction",
    "ReconciliationAttempt",
    "DeletionResult",
    "RunContainerRequest",
    "RunContainerResponse",
    "ExecRequest",
    "ExecResponse",
    # Execution models
    "ExecuteCodeRequest",
    "ExecutionResult",
    # Error models
    "ErrorType",
    "ErrorDetail",
    "ErrorResponse",
    "ContainerApiException",
    "ValidationError",
    "ResourceNotFoundError",
    "ContainerNotFoundError",
    "ImageNotFoundError",
    "ResourceConflictError",
    "UnknownContainerStatusError",
    "UnsupportedLanguageError",
    "EngineUnavailableError",
    "EngineError",
]
