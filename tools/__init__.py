"""Tools module for external process operations.

Provides deterministic tool abstractions for:
- Shell commands (git, svn, gem, tar, unzip)
- Task runner hooks (migrations, updates)
"""

from .base import BaseTool, ToolResult, ToolStatus
from .shell_tool import ShellTool
from .task_runner import TaskRunner

__all__ = [
    "BaseTool",
    "ToolResult",
    "ToolStatus",
    "ShellTool",
    "TaskRunner",
]
