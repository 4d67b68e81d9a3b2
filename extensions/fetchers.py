"""Fetch strategies that bring an extension's source onto local disk.

Two families are provided:

- Checkout strategies (Git, Subversion) clone a repository into the
  temporary directory.
- Download strategies (Gem, Tarball, Zip) download an archive into the
  temporary directory and unpack it.

Strategies register themselves by ``install_type`` so that registry
records can select them by name. A strategy may also claim records that
carry no install type through its ``matches`` predicate.
"""

from __future__ import annotations

import inspect
import logging
import re
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import httpx

from extensions.errors import FetchFailure, UnknownInstallType
from extensions.parsing import parse_archive_root, parse_quoted_path, url_filename
from extensions.records import ExtensionRecord
from pipeline.config import FetchConfig
from tools.base import ToolResult
from tools.shell_tool import ShellTool

logger = logging.getLogger(__name__)


@dataclass
class FetchContext:
    """Environment shared by every fetch strategy."""

    temp_dir: Path
    shell: ShellTool
    download_timeout: float = 120.0
    transport: httpx.BaseTransport | None = None

    @classmethod
    def from_config(
        cls,
        config: FetchConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> FetchContext:
        temp_dir = config.resolved_temp_dir()
        return cls(
            temp_dir=temp_dir,
            shell=ShellTool(working_dir=temp_dir, timeout=config.command_timeout),
            download_timeout=config.download_timeout,
            transport=transport,
        )


class FetchStrategy(ABC):
    """Acquires the source of one extension.

    ``working_path`` is None until :meth:`acquire` succeeds, after which it
    points at the directory holding the extension's source.
    """

    install_type: ClassVar[str] = ""
    url_field: ClassVar[str] = "repository_url"

    def __init__(self, url: str, name: str, context: FetchContext) -> None:
        self.url = url
        self.name = name
        self.context = context
        self.working_path: Path | None = None

    @classmethod
    def from_record(cls, record: ExtensionRecord, context: FetchContext) -> FetchStrategy:
        url = getattr(record, cls.url_field)
        if not url:
            raise FetchFailure(
                f"Extension '{record.name}' has no {cls.url_field.replace('_', ' ')} "
                f"for install type {cls.install_type}"
            )
        return cls(url, record.name, context)

    @classmethod
    def matches(cls, record: ExtensionRecord) -> bool:
        """Whether this strategy claims a record without an install type."""
        return False

    @property
    def temp_dir(self) -> Path:
        return self.context.temp_dir

    @abstractmethod
    def acquire(self) -> Path:
        """Fetch the source and return the local path holding it."""
        ...

    def discard(self) -> None:
        """Remove the fetched source tree, if any."""
        if self.working_path is not None and self.working_path.exists():
            shutil.rmtree(self.working_path, ignore_errors=True)
        self.working_path = None

    def _run(self, command: list[str], action: str) -> ToolResult:
        result = self.context.shell.run(command, cwd=self.temp_dir)
        if not result:
            raise FetchFailure(f"{action} failed for {self.name}: {result.error}")
        return result

    def _finish(self, path: Path) -> Path:
        if not path.exists():
            raise FetchFailure(f"Fetched source for {self.name} not found at {path}")
        self.working_path = path
        logger.info("Fetched %s into %s", self.name, path)
        return path

    def _clear(self, path: Path) -> None:
        if path.exists():
            logger.debug("Removing stale %s", path)
            try:
                shutil.rmtree(path)
            except OSError as e:
                raise FetchFailure(f"Could not remove stale {path}: {e}") from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, url={self.url!r})"


class CheckoutStrategy(FetchStrategy):
    """Clones a repository into ``<temp_dir>/<name>``."""

    url_field = "repository_url"

    @abstractmethod
    def checkout_command(self) -> list[str]:
        ...

    def checkout(self) -> Path:
        target = self.temp_dir / self.name
        self._clear(target)
        self._run(self.checkout_command(), "Checkout")
        return self._finish(target)

    def acquire(self) -> Path:
        return self.checkout()


class DownloadStrategy(FetchStrategy):
    """Downloads an archive into the temp directory and unpacks it."""

    url_field = "download_url"

    @property
    def filename(self) -> str:
        return url_filename(self.url)

    @property
    def archive_path(self) -> Path:
        return self.temp_dir / self.filename

    def download(self) -> Path:
        target = self.archive_path
        logger.info("Downloading %s", self.url)
        try:
            with httpx.Client(
                timeout=self.context.download_timeout,
                follow_redirects=True,
                transport=self.context.transport,
            ) as client:
                with client.stream("GET", self.url) as response:
                    response.raise_for_status()
                    with open(target, "wb") as f:
                        for chunk in response.iter_bytes():
                            f.write(chunk)
        except httpx.HTTPStatusError as e:
            self._remove_archive()
            raise FetchFailure(
                f"Download of {self.url} failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            self._remove_archive()
            raise FetchFailure(f"Download of {self.url} failed: {e}") from e
        except OSError as e:
            self._remove_archive()
            raise FetchFailure(f"Could not write {target}: {e}") from e
        return target

    def _remove_archive(self) -> None:
        # Only a regular file can be ours; leave anything else in place
        try:
            if self.archive_path.is_file():
                self.archive_path.unlink()
        except OSError as e:
            logger.warning("Could not remove %s: %s", self.archive_path, e)

    @abstractmethod
    def unpack(self) -> Path:
        """Unpack the downloaded archive and set ``working_path``."""
        ...

    def acquire(self) -> Path:
        self.download()
        try:
            return self.unpack()
        finally:
            self._remove_archive()


_STRATEGIES: dict[str, type[FetchStrategy]] = {}


def register_strategy(cls: type[FetchStrategy]) -> type[FetchStrategy]:
    """Class decorator adding a strategy to the install type registry."""
    if not cls.install_type:
        raise ValueError(f"{cls.__name__} must define install_type")
    if inspect.isabstract(cls):
        raise ValueError(f"{cls.__name__} is abstract and cannot be registered")
    key = cls.install_type.lower()
    if key in _STRATEGIES and _STRATEGIES[key] is not cls:
        raise ValueError(
            f"Install type {cls.install_type} already registered by {_STRATEGIES[key].__name__}"
        )
    _STRATEGIES[key] = cls
    return cls


def registered_strategies() -> dict[str, type[FetchStrategy]]:
    """Registered strategies keyed by install type."""
    return {cls.install_type: cls for cls in _STRATEGIES.values()}


def strategy_class_for(record: ExtensionRecord) -> type[FetchStrategy]:
    """Select the strategy class for a registry record.

    Raises:
        UnknownInstallType: If the tag is unknown, or the record has no tag
            and no strategy claims it.
    """
    if record.install_type:
        try:
            return _STRATEGIES[record.install_type.lower()]
        except KeyError:
            known = ", ".join(sorted(registered_strategies()))
            raise UnknownInstallType(
                f"Unknown install type '{record.install_type}' for {record.name}. "
                f"Known types: {known}"
            ) from None

    for cls in _STRATEGIES.values():
        if cls.matches(record):
            return cls

    raise UnknownInstallType(
        f"Cannot determine how to install {record.name}: no install type given "
        "and no strategy matches its source"
    )


def build_strategy(record: ExtensionRecord, context: FetchContext) -> FetchStrategy:
    """Instantiate the fetch strategy selected by ``record``."""
    return strategy_class_for(record).from_record(record, context)


@register_strategy
class Git(CheckoutStrategy):
    install_type = "Git"
    URL_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"\.?git")

    @classmethod
    def matches(cls, record: ExtensionRecord) -> bool:
        return bool(record.repository_url and cls.URL_PATTERN.search(record.repository_url))

    def checkout_command(self) -> list[str]:
        return ["git", "clone", self.url, self.name]


@register_strategy
class Subversion(CheckoutStrategy):
    install_type = "Subversion"

    def checkout_command(self) -> list[str]:
        return ["svn", "checkout", self.url, self.name]


@register_strategy
class Gem(DownloadStrategy):
    """Installs the gem with the gem tool, then unpacks it."""

    install_type = "Gem"

    @property
    def gem_name(self) -> str:
        return self.filename.split("-")[0]

    def is_available(self) -> bool:
        """Whether a gem of the same base name is already installed."""
        probe = self.context.shell.run(
            ["gem", "list", "-i", f"^{self.gem_name}$"], cwd=self.temp_dir
        )
        return probe.success and probe.stdout.strip() == "true"

    def download(self) -> Path:
        if self.is_available():
            logger.info("Gem %s already installed, skipping download", self.gem_name)
            return self.archive_path
        archive = super().download()
        self._run(["gem", "install", self.filename], "gem install")
        return archive

    def unpack(self) -> Path:
        result = self._run(["gem", "unpack", self.gem_name], "gem unpack")
        # Relative paths are reported relative to the unpack directory
        return self._finish(self.temp_dir / parse_quoted_path(result.stdout))


@register_strategy
class Tarball(DownloadStrategy):
    install_type = "Tarball"

    @property
    def compressed(self) -> bool:
        return "gz" in self.filename

    def list_command(self) -> list[str]:
        flags = "-tzf" if self.compressed else "-tf"
        return ["tar", flags, self.filename]

    def unpack_command(self) -> list[str]:
        flags = "-xzvf" if self.compressed else "-xvf"
        return ["tar", flags, self.filename]

    def unpack(self) -> Path:
        # A leftover tree with the archive's root name would merge into this one
        contents = self._run(self.list_command(), "tar")
        self._clear(self.temp_dir / parse_archive_root(contents.stdout or contents.stderr))
        result = self._run(self.unpack_command(), "tar")
        # bsdtar lists members on stderr
        listing = result.stdout or result.stderr
        return self._finish(self.temp_dir / parse_archive_root(listing))


@register_strategy
class Zip(DownloadStrategy):
    install_type = "Zip"

    def unpack_command(self) -> list[str]:
        return ["unzip", "-o", self.filename, "-d", self.name]

    def unpack(self) -> Path:
        target = self.temp_dir / self.name
        self._clear(target)
        self._run(self.unpack_command(), "unzip")
        return self._finish(target)
