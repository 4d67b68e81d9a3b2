"""Task runner hooks for extension migrations and updates."""

import logging
from pathlib import Path

from pipeline.config import TaskRunnerConfig

from .base import ToolResult
from .shell_tool import ShellTool

logger = logging.getLogger(__name__)


class TaskRunner:
    """Runs named maintenance tasks of the host application.

    Each call spawns the configured task runner (``rake`` by default) with
    the task name, any extra arguments and the runtime environment, e.g.::

        rake radiant:extensions:tags:migrate VERSION=0 RAILS_ENV=production

    Failures are returned, never retried.
    """

    def __init__(
        self,
        config: TaskRunnerConfig | None = None,
        working_dir: Path | str | None = None,
        shell: ShellTool | None = None,
    ) -> None:
        """Initialize the task runner.

        Args:
            config: Task runner configuration.
            working_dir: Application root the tasks run in.
            shell: Shell tool to use (default: one allowing the runner command).
        """
        self.config = config or TaskRunnerConfig()
        if not self.config.command:
            raise ValueError("Task runner command must not be empty")
        self.shell = shell or ShellTool(
            working_dir=working_dir,
            timeout=self.config.timeout,
            allowed_commands=ShellTool.ALLOWED_COMMANDS | {Path(self.config.command[0]).name},
        )

    def task_name(self, extension_name: str, action: str) -> str:
        return f"{self.config.namespace}:{extension_name}:{action}"

    def run(self, task: str, *args: str) -> ToolResult:
        """Run ``task`` with ``args`` against the configured environment."""
        assignment = f"{self.config.environment_variable}={self.config.environment}"
        command = [*self.config.command, task, *args, assignment]
        logger.info("Running task %s", " ".join([task, *args]))
        return self.shell.run(
            command,
            timeout=self.config.timeout,
            env={self.config.environment_variable: self.config.environment},
        )

    def migrate(self, extension_name: str) -> ToolResult:
        return self.run(self.task_name(extension_name, "migrate"))

    def migrate_down(self, extension_name: str) -> ToolResult:
        """Roll back every migration of the extension."""
        return self.run(self.task_name(extension_name, "migrate"), "VERSION=0")

    def update(self, extension_name: str) -> ToolResult:
        """Copy the extension's public assets and run its setup."""
        return self.run(self.task_name(extension_name, "update"))
