"""Unit tests for the Docker client factory and service dependencies."""

from unittest.mock import MagicMock, patch

import pytest
from docker.errors import DockerException

from dockctl.dependencies.services import get_docker_client
from dockctl.models.errors import EngineUnavailableError
from dockctl.services.container.client import DockerClientFactory


@pytest.fixture
def docker_module():
    with patch("dockctl.services.container.client.docker") as mock_docker:
        client = MagicMock()
        client.version.return_value = {"Version": "27.0.1", "ApiVersion": "1.46"}
        mock_docker.DockerClient.return_value = client
        mock_docker.from_env.return_value = client
        yield mock_docker


class TestDockerClientFactory:
    """Tests for lazy client creation."""

    def test_not_connected_until_first_use(self, docker_module):
        """Test construction does not touch the engine."""
        DockerClientFactory(base_url="unix:///var/run/docker.sock")

        docker_module.DockerClient.assert_not_called()

    def test_base_url_client(self, docker_module):
        """Test an explicit base URL is used."""
        factory = DockerClientFactory(base_url="tcp://127.0.0.1:2375", timeout=5)

        client = factory.get_client()

        assert client is docker_module.DockerClient.return_value
        docker_module.DockerClient.assert_called_once_with(
            base_url="tcp://127.0.0.1:2375", timeout=5
        )
        client.ping.assert_called_once()

    def test_environment_client(self, docker_module):
        """Test an empty base URL falls back to the environment."""
        factory = DockerClientFactory(base_url="", timeout=5)

        factory.get_client()

        docker_module.from_env.assert_called_once_with(timeout=5)

    def test_client_is_cached(self, docker_module):
        """Test one client is shared across calls."""
        factory = DockerClientFactory(base_url="unix:///var/run/docker.sock")

        assert factory.get_client() is factory.get_client()
        docker_module.DockerClient.assert_called_once()

    def test_failure_is_remembered_until_reset(self, docker_module):
        """Test a failed connection is not retried until reset."""
        docker_module.DockerClient.side_effect = DockerException("socket not found")
        factory = DockerClientFactory(base_url="unix:///nope.sock")

        assert factory.get_client() is None
        assert factory.is_available() is False
        assert "socket not found" in factory.get_initialization_error()
        assert docker_module.DockerClient.call_count == 1

        factory.reset_initialization()
        factory.get_client()

        assert docker_module.DockerClient.call_count == 2

    def test_close(self, docker_module):
        factory = DockerClientFactory(base_url="unix:///var/run/docker.sock")
        client = factory.get_client()

        factory.close()

        client.close.assert_called_once()


class TestGetDockerClient:
    """Tests for the get_docker_client dependency."""

    def test_unavailable_engine_raises_503(self):
        factory = MagicMock()
        factory.get_client.return_value = None
        factory.get_initialization_error.return_value = "socket not found"

        with patch("dockctl.dependencies.services.get_client_factory", return_value=factory):
            with pytest.raises(EngineUnavailableError) as exc_info:
                get_docker_client()

        assert exc_info.value.status_code == 503
        assert "socket not found" in exc_info.value.message
        factory.reset_initialization.assert_called_once()

    def test_returns_shared_client(self):
        factory = MagicMock()

        with patch("dockctl.dependencies.services.get_client_factory", return_value=factory):
            assert get_docker_client() is factory.get_client.return_value
