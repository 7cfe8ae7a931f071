"""
Pytest configuration and shared fixtures for Overstory tests.
"""

import logging
import sys
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from overstory.tmux import TmuxService, reset_tmux_service
from overstory.utils.process import ProcessResult


def make_result(
    stdout: str = "", stderr: str = "", exit_code: int = 0
) -> ProcessResult:
    """Build a ProcessResult as the invoker would return it."""
    return ProcessResult(command=[], stdout=stdout, stderr=stderr, exit_code=exit_code)


@pytest.fixture
def result_factory() -> Callable[..., ProcessResult]:
    """Provide the ProcessResult builder to tests."""
    return make_result


@pytest.fixture
def mock_runner() -> AsyncMock:
    """Runner that succeeds with empty output unless reconfigured."""
    return AsyncMock(return_value=make_result())


@pytest.fixture
def tmux_service(mock_runner) -> TmuxService:
    """Create TmuxService with a mocked runner."""
    return TmuxService(runner=mock_runner)


@pytest.fixture(autouse=True)
def reset_global_service():
    """Drop the global tmux service between tests."""
    reset_tmux_service()
    yield
    reset_tmux_service()


@pytest.fixture
def temp_log_file() -> Generator[Path, None, None]:
    """Provide a temporary log file for testing."""
    with tempfile.NamedTemporaryFile(suffix=".log", delete=False) as f:
        log_file = Path(f.name)

    yield log_file

    if log_file.exists():
        log_file.unlink()


@pytest.fixture
def temp_log_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for log files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def sample_log_record():
    """Provide a sample log record for testing."""
    record = logging.LogRecord(
        name="test_logger",
        level=logging.INFO,
        pathname="/test/path.py",
        lineno=42,
        msg="Session create success",
        args=(),
        exc_info=None,
        func="test_function",
    )
    record.context = "tmux"
    record.agent_name = "overstory-auth"
    return record


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(logging.NOTSET)

    yield

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.setLevel(original_level)
    for handler in original_handlers:
        root_logger.addHandler(handler)
