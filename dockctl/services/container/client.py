"""Docker client factory and initialization."""

from typing import Optional

import docker
import requests
import structlog
from docker.errors import DockerException

from ...config import settings

logger = structlog.get_logger(__name__)


class DockerClientFactory:
    """Factory for creating the shared Docker client on first use."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """Initialize Docker client manager without blocking operations."""
        self.base_url = base_url if base_url is not None else settings.docker_base_url
        self.timeout = timeout or settings.docker_timeout
        self.client: Optional[docker.DockerClient] = None
        self._initialization_error: Optional[str] = None
        self._initialization_attempted: bool = False

    def _ensure_client(self) -> bool:
        """Ensure Docker client is initialized. Returns True if successful."""
        if self.client is not None:
            return True

        if self._initialization_attempted and self._initialization_error:
            return False

        self._initialization_attempted = True
        try:
            if self.base_url:
                logger.info("Initializing Docker client", base_url=self.base_url)
                client = docker.DockerClient(base_url=self.base_url, timeout=self.timeout)
            else:
                logger.info("Initializing Docker client from environment")
                client = docker.from_env(timeout=self.timeout)

            client.ping()
            version_info = client.version()
            logger.info(
                "Docker connection successful",
                server_version=version_info.get("Version", "unknown"),
                api_version=version_info.get("ApiVersion", "unknown"),
            )
            self.client = client
            self._initialization_error = None
            return True

        except (DockerException, requests.exceptions.ConnectionError) as e:
            logger.error("Failed to create Docker client", error=str(e))
            self._initialization_error = str(e)
            self.client = None
            return False

    def is_available(self) -> bool:
        """Check if Docker is available."""
        return self._ensure_client()

    def get_initialization_error(self) -> Optional[str]:
        """Get Docker initialization error if any."""
        return self._initialization_error

    def reset_initialization(self) -> None:
        """Reset initialization state to allow retry."""
        self._initialization_attempted = False
        self._initialization_error = None
        self.close()
        self.client = None
        logger.info("Docker client initialization state reset")

    def get_client(self) -> Optional[docker.DockerClient]:
        """Get the Docker client, ensuring it's initialized."""
        if self._ensure_client():
            return self.client
        return None

    def close(self):
        """Close Docker client connection."""
        try:
            if self.client is not None:
                self.client.close()
        except Exception as e:
            logger.error("Error closing Docker client", error=str(e))
