"""Shell command execution tool."""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Any

from .base import BaseTool, ToolResult, ToolStatus

logger = logging.getLogger(__name__)


class ShellTool(BaseTool):
    """Tool for executing external commands.

    Used for:
    - VCS checkouts (git, svn)
    - Archive unpacking (tar, unzip, gem)
    - Task runner hooks (rake)
    """

    name = "shell"
    description = "Shell command execution"

    # Commands that are allowed by default
    ALLOWED_COMMANDS = {
        "git",
        "svn",
        "gem",
        "tar",
        "unzip",
        "rake",
        "bundle",
    }

    def __init__(
        self,
        working_dir: Path | str | None = None,
        timeout: int = 300,
        allowed_commands: set[str] | None = None,
    ) -> None:
        """Initialize shell tool.

        Args:
            working_dir: Default working directory for commands
            timeout: Default timeout in seconds
            allowed_commands: Override allowed command set
        """
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.timeout = timeout
        self.allowed_commands = allowed_commands or self.ALLOWED_COMMANDS

    def execute(self, **kwargs: Any) -> ToolResult:
        """Execute a command. See :meth:`run` for parameters."""
        return self.run(**kwargs)

    def run(
        self,
        command: str | list[str],
        cwd: Path | str | None = None,
        timeout: int | None = None,
        env: dict[str, str] | None = None,
    ) -> ToolResult:
        """Run a command and capture its output.

        Args:
            command: Command as an argument list (or a string split with shlex)
            cwd: Working directory (default: the tool's working directory)
            timeout: Timeout in seconds (default: the tool's timeout)
            env: Extra environment variables for the child process

        Returns:
            ToolResult with stdout, stderr and returncode in ``output``
        """
        if isinstance(command, str):
            parts = shlex.split(command)
        else:
            parts = list(command)

        if not parts:
            return ToolResult(status=ToolStatus.FAILURE, error="Empty command")

        cmd_name = Path(parts[0]).name
        if cmd_name not in self.allowed_commands:
            return ToolResult(
                status=ToolStatus.FAILURE,
                error=f"Command not allowed: {cmd_name}. Allowed: {sorted(self.allowed_commands)}",
            )

        run_dir = Path(cwd) if cwd else self.working_dir
        limit = timeout or self.timeout
        logger.debug("Running %s in %s", shlex.join(parts), run_dir)

        try:
            result = subprocess.run(
                parts,
                cwd=run_dir,
                capture_output=True,
                text=True,
                timeout=limit,
                check=False,
                env={**os.environ, **(env or {})},
            )
        except subprocess.TimeoutExpired:
            return ToolResult(
                status=ToolStatus.TIMEOUT,
                error=f"Command timed out after {limit}s: {shlex.join(parts)}",
            )
        except FileNotFoundError:
            return ToolResult(
                status=ToolStatus.FAILURE,
                error=f"Command not found: {parts[0]}",
            )

        return ToolResult(
            status=ToolStatus.SUCCESS if result.returncode == 0 else ToolStatus.FAILURE,
            output={
                "stdout": result.stdout,
                "stderr": result.stderr,
                "returncode": result.returncode,
            },
            error=(result.stderr.strip() or f"exit status {result.returncode}")
            if result.returncode != 0
            else None,
            metadata={"command": parts, "cwd": str(run_dir)},
        )
