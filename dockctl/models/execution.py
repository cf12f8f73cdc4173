"""Ephemeral execution models."""

from typing import Optional

from pydantic import BaseModel, Field


class ExecutionResult(BaseModel):
    """Output captured from a snippet run in a throwaway container."""

    output: str = Field(default="", description="Combined stdout/stderr, trimmed")
    exit_code: Optional[int] = Field(
        default=None, description="Exit code of the interpreter process"
    )
    language: str
    image: str
    container_id: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ExecuteCodeRequest(BaseModel):
    """Request model for ``POST /execute``."""

    language: str = Field(..., description="Language tag, e.g. python or javascript")
    code: str = Field(..., description="Source code to evaluate")
