"""Unit tests for settings and the language registry."""

import warnings

import pytest
from pydantic import ValidationError

from dockctl.config import Settings
from dockctl.config.languages import (
    LANGUAGES,
    get_language,
    get_supported_languages,
    is_supported_language,
    normalize_language,
)


class TestSettingsDefaults:
    """Tests for default configuration values."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        for var in ("API_PORT", "DELETE_MAX_RETRIES", "DELETE_POLL_INTERVAL", "RUNNER_STOP_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)

        assert settings.api_port == 4000
        assert settings.delete_max_retries == 5
        assert settings.delete_poll_interval == 1.0
        assert settings.runner_stop_timeout == 1

    def test_env_override(self, monkeypatch):
        """Test values are read from the environment."""
        monkeypatch.setenv("API_PORT", "8080")
        monkeypatch.setenv("DELETE_MAX_RETRIES", "3")

        settings = Settings(_env_file=None)

        assert settings.api_port == 8080
        assert settings.delete_max_retries == 3

    def test_empty_base_url_means_environment(self, monkeypatch):
        """Test an empty DOCKER_BASE_URL falls back to docker.from_env."""
        monkeypatch.setenv("DOCKER_BASE_URL", "")

        settings = Settings(_env_file=None)

        assert settings.docker_base_url is None

    def test_log_format_case_insensitive(self, monkeypatch):
        """Test LOG_FORMAT accepts upper case."""
        monkeypatch.setenv("LOG_FORMAT", "CONSOLE")

        assert Settings(_env_file=None).log_format == "console"

    def test_builds_without_deprecation_warnings(self):
        """Test the settings model uses the current pydantic configuration API."""
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            settings = Settings(_env_file=None)

        assert settings.delete_max_retries >= 1

    def test_invalid_port_rejected(self, monkeypatch):
        """Test an out-of-range port fails validation."""
        monkeypatch.setenv("API_PORT", "70000")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestImageForLanguage:
    """Tests for Settings.get_image_for_language."""

    def test_default_images(self):
        settings = Settings(_env_file=None)

        assert settings.get_image_for_language("python") == "python:3-slim"
        assert settings.get_image_for_language("js") == "node:lts-alpine"

    def test_image_override(self):
        """Test the runner image can be overridden per language."""
        settings = Settings(_env_file=None, runner_python_image="python:3.12-alpine")

        assert settings.get_image_for_language("py") == "python:3.12-alpine"

    def test_unsupported_language(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None).get_image_for_language("ruby")


class TestLanguageRegistry:
    """Tests for the language registry."""

    def test_supported_languages(self):
        assert get_supported_languages() == ["python", "javascript"]

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("python", "python"),
            ("PY", "python"),
            ("python3", "python"),
            ("js", "javascript"),
            ("Node", "javascript"),
            (" javascript ", "javascript"),
        ],
    )
    def test_normalize(self, tag, expected):
        """Test tags and aliases resolve case-insensitively."""
        assert normalize_language(tag) == expected

    def test_unknown_language(self):
        assert get_language("ruby") is None
        assert not is_supported_language("ruby")
        assert not is_supported_language("")

    def test_build_command_keeps_code_as_one_argument(self):
        """Test the code is appended as a single argv entry."""
        code = "print('a b')\nprint(2)"

        assert LANGUAGES["python"].build_command(code) == ["python", "-c", code]
        assert LANGUAGES["javascript"].build_command("1") == ["node", "-e", "1"]
