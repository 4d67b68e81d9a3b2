"""Entry point tying the registry, fetch strategies and installers together."""

from __future__ import annotations

import logging
from pathlib import Path

from extensions.errors import AlreadyInstalled, NotInstalled, RemoveFailure
from extensions.fetchers import FetchContext, build_strategy
from extensions.installer import Installer, Uninstaller
from extensions.paths import ExtensionPaths
from extensions.registry import RegistryClient
from pipeline.config import Config, get_config
from tools.task_runner import TaskRunner

logger = logging.getLogger(__name__)


class ExtensionManager:
    """Installs and uninstalls extensions by name.

    Collaborators are built from configuration unless given explicitly.

    Example:
        >>> manager = ExtensionManager()
        >>> manager.install("page_attachments")
        >>> manager.uninstall("page_attachments")
    """

    def __init__(
        self,
        config: Config | None = None,
        paths: ExtensionPaths | None = None,
        registry: RegistryClient | None = None,
        tasks: TaskRunner | None = None,
        fetch_context: FetchContext | None = None,
    ) -> None:
        self.config = config or get_config()
        self.paths = paths or ExtensionPaths(
            self.config.extensions.root,
            extra_roots=self.config.extensions.extra_roots,
            subdir=self.config.extensions.subdir,
        )
        self.registry = registry or RegistryClient(self.config.registry)
        self.tasks = tasks or TaskRunner(self.config.tasks, working_dir=self.paths.root)
        self.fetch_context = fetch_context or FetchContext.from_config(self.config.fetch)

    def is_installed(self, name: str) -> bool:
        return self.paths.is_installed(name)

    def install(self, name: str) -> Path:
        """Install an extension from the registry.

        Args:
            name: Underscored extension name.

        Returns:
            The installed extension directory.

        Raises:
            AlreadyInstalled: If a directory for the extension already exists.
            ExtensionError: If any step of the install fails.
        """
        if self.is_installed(name):
            raise AlreadyInstalled(f"{name} is already installed.")

        record = self.registry.find_by_name(name)
        strategy = build_strategy(record, self.fetch_context)
        logger.info("Installing %s with %r", name, strategy)
        return Installer(strategy, self.paths.install_root, self.tasks).install()

    def uninstall(self, name: str) -> None:
        """Roll back and remove an installed extension.

        Raises:
            NotInstalled: If no directory for the extension exists.
            RemoveFailure: If the extension lives outside the install root.
            ExtensionError: If any step of the removal fails.
        """
        location = self.paths.locate(name)
        if location is None:
            raise NotInstalled(f"{name} is not installed.")
        if location != self.paths.install_dir(name):
            raise RemoveFailure(
                f"{name} is installed in {location.parent}, outside {self.paths.install_root}"
            )

        Uninstaller(name, self.paths.install_root, self.tasks).uninstall()
