"""Unit tests for the ephemeral execution runner."""

import pytest

from dockctl.models.errors import (
    EngineError,
    ResourceConflictError,
    UnsupportedLanguageError,
)
from dockctl.services.container.engine import ExecOutput
from dockctl.services.runner import IDLE_COMMAND, EphemeralRunner

CONTAINER_ID = "abc123def4567890"


@pytest.fixture
def runner(mock_engine):
    """Runner that pulls missing images and stops with a 1s grace period."""
    return EphemeralRunner(mock_engine, pull_missing_images=True, stop_timeout=1)


class TestRunSuccess:
    """Tests for a successful run."""

    @pytest.mark.asyncio
    async def test_python_snippet_output_is_trimmed(self, runner, mock_engine):
        """Test the interpreter output is returned without surrounding whitespace."""
        mock_engine.exec_run.return_value = ExecOutput(0, b"2\n")

        result = await runner.run("python", "print(1+1)")

        assert result.output == "2"
        assert result.exit_code == 0
        assert result.succeeded
        assert result.language == "python"
        assert result.container_id == CONTAINER_ID
        mock_engine.exec_run.assert_awaited_once_with(
            CONTAINER_ID, ["python", "-c", "print(1+1)"]
        )

    @pytest.mark.asyncio
    async def test_container_kept_alive_by_idle_command(self, runner, mock_engine):
        """Test the container is created with the idle command and no TTY."""
        await runner.run("py", "print('hi')")

        spec = mock_engine.create_container.await_args.args[0]
        assert spec["Image"] == "python:3-slim"
        assert spec["Cmd"] == IDLE_COMMAND
        assert spec["Tty"] is False
        assert spec["AttachStdout"] and spec["AttachStderr"]
        mock_engine.start.assert_awaited_once_with(CONTAINER_ID)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag", ["javascript", "JS", "node"])
    async def test_javascript_aliases_use_node(self, runner, mock_engine, tag):
        """Test JavaScript tags run node -e in the node image."""
        await runner.run(tag, "console.log(2)")

        spec = mock_engine.create_container.await_args.args[0]
        assert spec["Image"] == "node:lts-alpine"
        mock_engine.exec_run.assert_awaited_once_with(
            CONTAINER_ID, ["node", "-e", "console.log(2)"]
        )

    @pytest.mark.asyncio
    async def test_code_passed_as_single_argument(self, runner, mock_engine):
        """Test code with quotes and newlines is not split or escaped."""
        code = "x = 'a \"b\"'\nprint(x)"

        await runner.run("python", code)

        cmd = mock_engine.exec_run.await_args.args[1]
        assert cmd[-1] == code
        assert len(cmd) == 3

    @pytest.mark.asyncio
    async def test_image_ensured_before_create(self, runner, mock_engine):
        """Test the image is pulled if missing when pulling is enabled."""
        await runner.run("python", "pass")

        mock_engine.ensure_image.assert_awaited_once_with("python:3-slim")

    @pytest.mark.asyncio
    async def test_no_pull_when_disabled(self, mock_engine):
        """Test the image is not ensured when pulling is disabled."""
        runner = EphemeralRunner(mock_engine, pull_missing_images=False)

        await runner.run("python", "pass")

        mock_engine.ensure_image.assert_not_called()


class TestNonZeroExit:
    """A failing snippet is not an error of the runner."""

    @pytest.mark.asyncio
    async def test_non_zero_exit_returns_output(self, runner, mock_engine):
        """Test the error text is returned and the exit code preserved."""
        mock_engine.exec_run.return_value = ExecOutput(
            1, b"Traceback (most recent call last):\nNameError: name 'x' is not defined\n"
        )

        result = await runner.run("python", "x")

        assert result.exit_code == 1
        assert not result.succeeded
        assert result.output.endswith("NameError: name 'x' is not defined")
        mock_engine.remove.assert_awaited_once_with(CONTAINER_ID)

    @pytest.mark.asyncio
    async def test_missing_exit_code_keeps_output(self, runner, mock_engine):
        """Test output is returned when the engine reports no exit code."""
        mock_engine.exec_run.return_value = ExecOutput(None, b"2\n")

        result = await runner.run("python", "print(1+1)")

        assert result.output == "2"
        assert result.exit_code is None
        assert not result.succeeded
        mock_engine.remove.assert_awaited_once_with(CONTAINER_ID)


class TestUnsupportedLanguage:
    """Unknown languages fail before touching the engine."""

    @pytest.mark.asyncio
    async def test_ruby_rejected_before_any_engine_call(self, runner, mock_engine):
        """Test no container is created for an unsupported language."""
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            await runner.run("ruby", "puts 1")

        assert exc_info.value.message == "Unsupported language environment: ruby"
        mock_engine.ensure_image.assert_not_called()
        mock_engine.create_container.assert_not_called()
        mock_engine.remove.assert_not_called()


class TestCleanup:
    """The container is always removed."""

    @pytest.mark.asyncio
    async def test_running_container_stopped_then_removed(
        self, runner, mock_engine, make_inspect
    ):
        """Test cleanup stops a still-running container before removing it."""
        mock_engine.inspect.return_value = make_inspect("running")

        await runner.run("python", "pass")

        mock_engine.stop.assert_awaited_once_with(CONTAINER_ID, timeout=1)
        mock_engine.remove.assert_awaited_once_with(CONTAINER_ID)

    @pytest.mark.asyncio
    async def test_exited_container_only_removed(
        self, runner, mock_engine, make_inspect
    ):
        """Test cleanup skips the stop when the container already exited."""
        mock_engine.inspect.return_value = make_inspect("exited")

        await runner.run("python", "pass")

        mock_engine.stop.assert_not_called()
        mock_engine.remove.assert_awaited_once_with(CONTAINER_ID)

    @pytest.mark.asyncio
    async def test_cleanup_errors_are_suppressed(self, runner, mock_engine):
        """Test a failed removal does not hide the result."""
        mock_engine.exec_run.return_value = ExecOutput(0, b"ok")
        mock_engine.remove.side_effect = ResourceConflictError("removal in progress")

        result = await runner.run("python", "print('ok')")

        assert result.output == "ok"

    @pytest.mark.asyncio
    async def test_cleanup_runs_after_exec_failure(self, runner, mock_engine):
        """Test the container is removed when the exec fails."""
        mock_engine.exec_run.side_effect = EngineError("exec failed")

        with pytest.raises(EngineError):
            await runner.run("python", "pass")

        mock_engine.remove.assert_awaited_once_with(CONTAINER_ID)

    @pytest.mark.asyncio
    async def test_no_cleanup_when_create_fails(self, runner, mock_engine):
        """Test nothing is removed when no container was created."""
        mock_engine.create_container.side_effect = EngineError("create failed")

        with pytest.raises(EngineError):
            await runner.run("python", "pass")

        mock_engine.inspect.assert_not_called()
        mock_engine.remove.assert_not_called()
