"""Install and uninstall pipelines for a single extension.

Installation runs fetch, copy, migrate and update in that order; removal
rolls migrations back before deleting any files. The first failing step
aborts the pipeline and nothing is retried.
"""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

from extensions.errors import (
    CopyFailure,
    ExtensionError,
    RemoveFailure,
    TaskFailure,
)
from extensions.fetchers import FetchStrategy
from tools.base import ToolResult
from tools.task_runner import TaskRunner

logger = logging.getLogger(__name__)


class InstallState(str, Enum):
    """Progress of an install."""

    NEW = "new"
    FETCHED = "fetched"
    COPIED = "copied"
    MIGRATED = "migrated"
    UPDATED = "updated"
    FAILED = "failed"


def _check_task(result: ToolResult, task: str, name: str) -> None:
    if not result:
        raise TaskFailure(f"Task {task} failed for {name}: {result.error}")


class Installer:
    """Installs one extension using a fetch strategy.

    Example:
        >>> installer = Installer(strategy, Path("vendor/extensions"), TaskRunner())
        >>> installer.install()
        PosixPath('vendor/extensions/tags')
    """

    def __init__(
        self,
        strategy: FetchStrategy,
        extensions_root: Path,
        tasks: TaskRunner,
    ) -> None:
        self.strategy = strategy
        self.extensions_root = Path(extensions_root)
        self.tasks = tasks
        self.state = InstallState.NEW
        self.failed_step: str | None = None

    @property
    def name(self) -> str:
        return self.strategy.name

    @property
    def target_dir(self) -> Path:
        return self.extensions_root / self.name

    def install(self) -> Path:
        """Run the full install pipeline.

        Returns:
            The installed extension directory.

        Raises:
            ExtensionError: From the first step that fails.
        """
        steps = [
            ("fetch", self.fetch, InstallState.FETCHED),
            ("copy", self.copy_to_extensions, InstallState.COPIED),
            ("migrate", self.migrate, InstallState.MIGRATED),
            ("update", self.update, InstallState.UPDATED),
        ]
        try:
            for step_name, step, next_state in steps:
                logger.info("%s: %s", self.name, step_name)
                step()
                self.state = next_state
        except ExtensionError:
            self.failed_step = step_name
            self.state = InstallState.FAILED
            logger.error("%s: install failed during %s", self.name, step_name)
            raise
        finally:
            self.strategy.discard()

        return self.target_dir

    def fetch(self) -> Path:
        return self.strategy.acquire()

    def copy_to_extensions(self) -> None:
        source = self.strategy.working_path
        if source is None or not source.exists():
            raise CopyFailure(f"No fetched source to install for {self.name}")
        if self.target_dir.exists():
            raise CopyFailure(f"{self.target_dir} already exists")

        try:
            self.extensions_root.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, self.target_dir, symlinks=True)
        except OSError as e:
            shutil.rmtree(self.target_dir, ignore_errors=True)
            raise CopyFailure(f"Could not copy {self.name} into {self.target_dir}: {e}") from e
        self.strategy.discard()

    def migrate(self) -> None:
        _check_task(self.tasks.migrate(self.name), "migrate", self.name)

    def update(self) -> None:
        _check_task(self.tasks.update(self.name), "update", self.name)


class Uninstaller:
    """Removes one installed extension."""

    def __init__(self, name: str, extensions_root: Path, tasks: TaskRunner) -> None:
        self.name = name
        self.extensions_root = Path(extensions_root)
        self.tasks = tasks

    @property
    def target_dir(self) -> Path:
        return self.extensions_root / self.name

    def uninstall(self) -> None:
        # Down migrations live in the extension, so they must run before removal
        self.migrate_down()
        self.remove_extension_directory()
        self.cleanup_environment()

    def migrate_down(self) -> None:
        logger.info("%s: migrate down", self.name)
        _check_task(self.tasks.migrate_down(self.name), "migrate VERSION=0", self.name)

    def remove_extension_directory(self) -> None:
        logger.info("%s: removing %s", self.name, self.target_dir)
        try:
            shutil.rmtree(self.target_dir)
        except OSError as e:
            raise RemoveFailure(f"Could not remove {self.target_dir}: {e}") from e

    def cleanup_environment(self) -> None:
        """Drop references to the extension from application configuration.

        Nothing records installed extensions besides their directories, so
        there is nothing to clean up yet.
        """
