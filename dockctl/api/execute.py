"""Ephemeral code execution endpoint."""

import structlog
from fastapi import APIRouter

from ..dependencies.services import RunnerDep
from ..models import ExecuteCodeRequest, ExecutionResult
from ..utils.id_generator import generate_request_id

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/execute", response_model=ExecutionResult)
async def execute_code(request: ExecuteCodeRequest, runner: RunnerDep) -> ExecutionResult:
    """Run a snippet in a throwaway container and return its output."""
    request_id = generate_request_id()[:8]
    logger.info(
        "Code execution request",
        request_id=request_id,
        language=request.language,
        code_length=len(request.code),
    )

    result = await runner.run(request.language, request.code)

    logger.info(
        "Code execution completed",
        request_id=request_id,
        exit_code=result.exit_code,
    )
    return result
