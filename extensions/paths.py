"""Filesystem layout of installed extensions."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

_CAMEL_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])|([a-z\d])([A-Z])")


def to_extension_name(value: str) -> str:
    """Convert a user-supplied name to the underscored extension name.

    Examples:
        >>> to_extension_name("PageAttachments")
        'page_attachments'
        >>> to_extension_name("page-attachments")
        'page_attachments'
    """
    text = _CAMEL_BOUNDARY.sub(
        lambda m: f"{m.group(1)}_{m.group(2)}" if m.group(1) else f"{m.group(3)}_{m.group(4)}",
        str(value).strip(),
    )
    return text.replace("-", "_").lower()


class ExtensionPaths:
    """Locates installed extensions under one or more extension roots.

    The first root is where extensions are installed and removed. Further
    roots (e.g. the framework's own tree) are only scanned when checking
    whether an extension is installed.

    Example:
        >>> paths = ExtensionPaths(Path("/srv/site"), extra_roots=[Path("/opt/cms")])
        >>> paths.install_dir("tags")
        PosixPath('/srv/site/vendor/extensions/tags')
    """

    def __init__(
        self,
        root: Path | str,
        extra_roots: Iterable[Path | str] = (),
        subdir: str = "vendor/extensions",
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.subdir = subdir
        self._extra_roots = [Path(p).expanduser().resolve() for p in extra_roots]

    @property
    def install_root(self) -> Path:
        """Writable directory that holds installed extensions."""
        return self.root / self.subdir

    @property
    def roots(self) -> list[Path]:
        """All extension directories, install root first, without duplicates."""
        seen: list[Path] = []
        for root in [self.root, *self._extra_roots]:
            candidate = root / self.subdir
            if candidate not in seen:
                seen.append(candidate)
        return seen

    def install_dir(self, name: str) -> Path:
        return self.install_root / name

    def extension_dirs(self) -> list[Path]:
        """Every extension directory found under any root."""
        found: list[Path] = []
        for root in self.roots:
            if not root.is_dir():
                continue
            found.extend(sorted(p for p in root.iterdir() if p.is_dir()))
        return found

    def locate(self, name: str) -> Path | None:
        """Return the first directory named ``name``, or None."""
        for path in self.extension_dirs():
            if path.name == name:
                return path
        return None

    def is_installed(self, name: str) -> bool:
        return self.locate(name) is not None
