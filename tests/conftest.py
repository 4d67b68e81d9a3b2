"""Pytest configuration and shared fixtures for extension script tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from extensions.fetchers import FetchContext
from extensions.paths import ExtensionPaths
from pipeline.config import Config, ExtensionsConfig, FetchConfig, TaskRunnerConfig
from tools.base import ToolResult, ToolStatus
from tools.shell_tool import ShellTool
from tools.task_runner import TaskRunner

Handler = Callable[[list[str], Path], ToolResult]


def ok(stdout: str = "", stderr: str = "") -> ToolResult:
    return ToolResult(
        status=ToolStatus.SUCCESS,
        output={"stdout": stdout, "stderr": stderr, "returncode": 0},
    )


def failed(stderr: str = "boom", returncode: int = 1) -> ToolResult:
    return ToolResult(
        status=ToolStatus.FAILURE,
        output={"stdout": "", "stderr": stderr, "returncode": returncode},
        error=stderr,
    )


class RecordingShell(ShellTool):
    """Shell tool that records commands instead of spawning processes.

    Handlers are keyed by the first one or two words of a command, e.g.
    ``"git"`` or ``"gem unpack"``; the most specific key wins.
    """

    def __init__(self, working_dir: Path) -> None:
        super().__init__(working_dir=working_dir)
        self.calls: list[tuple[list[str], Path]] = []
        self.handlers: dict[str, Handler] = {}

    def on(self, prefix: str, handler: Handler) -> None:
        self.handlers[prefix] = handler

    def commands(self) -> list[list[str]]:
        return [command for command, _ in self.calls]

    def run(self, command, cwd=None, timeout=None, env=None) -> ToolResult:
        parts = list(command)
        run_dir = Path(cwd) if cwd else self.working_dir
        self.calls.append((parts, run_dir))
        for key in (" ".join(parts[:2]), parts[0]):
            if key in self.handlers:
                return self.handlers[key](parts, run_dir)
        return ok()


def make_checkout(command: list[str], cwd: Path) -> ToolResult:
    """Handler simulating ``git clone URL NAME`` / ``svn checkout URL NAME``."""
    target = cwd / command[-1]
    target.mkdir(parents=True)
    (target / "README").write_text("extension source")
    (target / "db" / "migrate").mkdir(parents=True)
    return ok()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    path = tmp_path / "site"
    path.mkdir()
    return path


@pytest.fixture
def test_config(site_root: Path, temp_dir: Path) -> Config:
    """Provide a test configuration."""
    return Config(
        tasks=TaskRunnerConfig(namespace="ext", environment="test"),
        fetch=FetchConfig(temp_dir=str(temp_dir)),
        extensions=ExtensionsConfig(root=str(site_root)),
    )


@pytest.fixture
def shell(tmp_path: Path) -> RecordingShell:
    return RecordingShell(tmp_path)


@pytest.fixture
def fetch_context(temp_dir: Path, shell: RecordingShell) -> FetchContext:
    return FetchContext(temp_dir=temp_dir, shell=shell)


@pytest.fixture
def tasks(test_config: Config, shell: RecordingShell) -> TaskRunner:
    return TaskRunner(test_config.tasks, shell=shell)


@pytest.fixture
def paths(site_root: Path) -> ExtensionPaths:
    return ExtensionPaths(site_root)
