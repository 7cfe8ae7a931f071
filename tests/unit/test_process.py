"""Unit tests for the subprocess invoker."""

import sys
from pathlib import Path

import pytest

from overstory.utils.process import ProcessError, ProcessResult, run_command


class TestProcessResult:
    """Test ProcessResult dataclass."""

    def test_succeeded(self):
        """Test succeeded reflects the exit code."""
        assert ProcessResult(["x"], "", "", 0).succeeded is True
        assert ProcessResult(["x"], "", "", 1).succeeded is False


class TestRunCommand:
    """Test running real child processes."""

    @pytest.mark.asyncio
    async def test_captures_stdout_stderr_and_exit_code(self):
        """Test output streams and exit status are captured."""
        result = await run_command(
            [
                sys.executable,
                "-c",
                "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)",
            ]
        )

        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"
        assert result.exit_code == 3
        assert result.succeeded is False
        assert result.command[0] == sys.executable

    @pytest.mark.asyncio
    async def test_arguments_are_not_shell_interpreted(self):
        """Test each argument reaches the child verbatim."""
        result = await run_command(
            [sys.executable, "-c", "import sys; print(sys.argv[1])", "$HOME; echo hi"]
        )

        assert result.stdout.strip() == "$HOME; echo hi"
        assert result.succeeded

    @pytest.mark.asyncio
    async def test_working_directory(self, tmp_path):
        """Test the child runs in the requested directory."""
        result = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )

        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    @pytest.mark.asyncio
    async def test_missing_executable(self):
        """Test a missing executable raises ProcessError."""
        command = ["definitely-not-a-real-tmux-binary", "list-sessions"]

        with pytest.raises(ProcessError) as exc_info:
            await run_command(command)

        assert exc_info.value.command == command
        assert "definitely-not-a-real-tmux-binary" in str(exc_info.value)
