"""Error models and exception classes for the container lifecycle API."""

import time
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration."""

    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RESOURCE_CONFLICT = "resource_conflict"
    UNKNOWN_STATUS = "unknown_status"
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    ENGINE_UNAVAILABLE = "engine_unavailable"
    ENGINE_ERROR = "engine_error"
    INTERNAL_SERVER = "internal_server"


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: Optional[str] = Field(None, description="Field name for validation errors")
    message: str = Field(..., description="Human-readable error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    model_config = ConfigDict(use_enum_values=True)

    error: str = Field(..., description="Main error message")
    error_type: ErrorType = Field(..., description="Error category")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    request_id: Optional[str] = Field(
        None, description="Request identifier for tracking"
    )
    timestamp: float = Field(default_factory=time.time, description="Error timestamp")


# Custom Exception Classes


class ContainerApiException(Exception):
    """Base exception for the container lifecycle API."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INTERNAL_SERVER,
        status_code: int = 500,
        details: Optional[List[ErrorDetail]] = None,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or []
        self.request_id = request_id
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to error response model."""
        return ErrorResponse(
            error=self.message,
            error_type=self.error_type,
            details=self.details if self.details else None,
            request_id=self.request_id,
        )


class ValidationError(ContainerApiException):
    """Request validation errors."""

    def __init__(self, message: str = "Validation failed", **kwargs):
        super().__init__(
            message=message, error_type=ErrorType.VALIDATION, status_code=400, **kwargs
        )


class ResourceNotFoundError(ContainerApiException):
    """Resource not found errors."""

    def __init__(self, resource: str, resource_id: str = None, **kwargs):
        message = f"{resource} not found"
        if resource_id:
            message += f": {resource_id}"
        super().__init__(
            message=message,
            error_type=ErrorType.RESOURCE_NOT_FOUND,
            status_code=404,
            **kwargs,
        )


class ContainerNotFoundError(ResourceNotFoundError):
    """The engine could not inspect the requested container."""

    def __init__(self, container_id: str, **kwargs):
        self.container_id = container_id
        super().__init__(resource="Container", resource_id=container_id, **kwargs)


class ImageNotFoundError(ResourceNotFoundError):
    """The engine has no such image locally."""

    def __init__(self, image: str, **kwargs):
        self.image = image
        super().__init__(resource="Docker image", resource_id=image, **kwargs)


class ResourceConflictError(ContainerApiException):
    """Resource conflict errors."""

    def __init__(self, message: str = "Resource conflict", **kwargs):
        super().__init__(
            message=message,
            error_type=ErrorType.RESOURCE_CONFLICT,
            status_code=409,
            **kwargs,
        )


class UnknownContainerStatusError(ContainerApiException):
    """The engine reported a container status the reconciler cannot act on."""

    def __init__(self, container_id: str, status: str, **kwargs):
        self.container_id = container_id
        self.status = status
        super().__init__(
            message=f"Unknown container status: {status}",
            error_type=ErrorType.UNKNOWN_STATUS,
            status_code=409,
            **kwargs,
        )


class UnsupportedLanguageError(ContainerApiException):
    """No execution environment is registered for the language."""

    def __init__(self, language: str, **kwargs):
        self.language = language
        super().__init__(
            message=f"Unsupported language environment: {language}",
            error_type=ErrorType.UNSUPPORTED_LANGUAGE,
            status_code=400,
            **kwargs,
        )


class EngineUnavailableError(ContainerApiException):
    """The container engine cannot be reached."""

    def __init__(self, message: str = None, **kwargs):
        super().__init__(
            message=message or "Docker engine is currently unavailable",
            error_type=ErrorType.ENGINE_UNAVAILABLE,
            status_code=503,
            **kwargs,
        )


class EngineError(ContainerApiException):
    """The container engine rejected or failed a request."""

    def __init__(self, message: str = None, **kwargs):
        super().__init__(
            message=message or "Docker engine error",
            error_type=ErrorType.ENGINE_ERROR,
            status_code=502,
            **kwargs,
        )
