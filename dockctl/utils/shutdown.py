"""Graceful shutdown handling for the application."""

import asyncio
from typing import Awaitable, Callable, List

import structlog

logger = structlog.get_logger(__name__)

CALLBACK_TIMEOUT = 10.0


class GracefulShutdownHandler:
    """Runs registered cleanup callbacks, newest first.

    Concurrent calls to ``shutdown`` run the callbacks once. After a shutdown
    completes the handler can be shut down again, so one process may host
    several application lifespans (as the test client does).
    """

    def __init__(self):
        self._shutdown_callbacks: List[Callable[[], Awaitable[None]]] = []
        self._is_shutting_down = False
        self._shutdown_lock = asyncio.Lock()

    @property
    def is_shutting_down(self) -> bool:
        return self._is_shutting_down

    def add_shutdown_callback(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Add a callback to be executed during shutdown; duplicates are ignored."""
        if callback in self._shutdown_callbacks:
            return
        self._shutdown_callbacks.append(callback)

    async def shutdown(self) -> None:
        """Perform graceful shutdown."""
        if self._is_shutting_down:
            # Wait for the shutdown already in progress
            async with self._shutdown_lock:
                return

        async with self._shutdown_lock:
            self._is_shutting_down = True
            logger.info("Starting graceful shutdown")

            try:
                for callback in reversed(self._shutdown_callbacks):
                    await self._run_callback(callback)
            finally:
                self._is_shutting_down = False

            logger.info("Graceful shutdown completed")

    async def _run_callback(self, callback: Callable[[], Awaitable[None]]) -> None:
        callback_name = getattr(callback, "__name__", str(callback))
        try:
            await asyncio.wait_for(callback(), timeout=CALLBACK_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning(
                "Shutdown callback timed out",
                callback=callback_name,
                timeout=CALLBACK_TIMEOUT,
            )
        except Exception as e:
            logger.error(
                "Error in shutdown callback",
                callback=callback_name,
                error=str(e),
            )


# Global shutdown handler instance
shutdown_handler = GracefulShutdownHandler()


async def close_docker_client() -> None:
    """Close the shared Docker client and let the next use reconnect."""
    from ..dependencies.services import get_client_factory

    get_client_factory().reset_initialization()
    logger.info("Docker client closed")


def setup_graceful_shutdown(handler: GracefulShutdownHandler = shutdown_handler) -> None:
    """Register the application's shutdown callbacks."""
    handler.add_shutdown_callback(close_docker_client)
    logger.info("Graceful shutdown handling configured")
