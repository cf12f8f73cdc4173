"""Request logging middleware."""

import time
from typing import Callable

import structlog
from fastapi import Request

logger = structlog.get_logger(__name__)

# Polled frequently by orchestrators; after the first hit only failures are logged
QUIET_PATHS = ("/", "/health")


class RequestLoggingMiddleware:
    """Logs method, path, status and duration for each HTTP request."""

    def __init__(self, app: Callable):
        self.app = app
        self._quiet_paths_seen = set()

    def _is_quiet(self, path: str, status) -> bool:
        """Repeated successful hits on a health path are not logged."""
        if path not in QUIET_PATHS:
            return False
        if status is None or status >= 400:
            return False
        if path in self._quiet_paths_seen:
            return True
        self._quiet_paths_seen.add(path)
        return False

    async def __call__(self, scope: dict, receive: Callable, send: Callable):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        path = request.url.path
        start_time = time.time()

        response_status = None

        async def send_wrapper(message):
            nonlocal response_status
            if message["type"] == "http.response.start":
                response_status = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=path,
                error=str(e),
            )
            raise
        finally:
            if not self._is_quiet(path, response_status):
                logger.info(
                    "Request processed",
                    method=request.method,
                    path=path,
                    status=response_status,
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )
