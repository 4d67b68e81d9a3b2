"""Parsers for the output of external unpack tools.

Each parser returns the path fragment a tool reports and raises
FetchParseError when the output does not have the expected shape.
"""

import re
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from extensions.errors import FetchParseError

QUOTED_PATH = re.compile(r"'([^']*)'")


def parse_quoted_path(output: str) -> str:
    """Return the first single-quoted substring of ``output``.

    ``gem unpack`` reports e.g. ``Unpacked gem: '/tmp/widget-1.2'``.
    """
    match = QUOTED_PATH.search(output or "")
    if match is None or not match.group(1).strip():
        raise FetchParseError(
            f"Could not find an unpacked path in output: {_excerpt(output)}"
        )
    return match.group(1)


def parse_archive_root(output: str) -> str:
    """Return the first path segment of the first line of ``output``.

    ``tar -xv`` lists each extracted member, so the first line of
    ``widget-1.2/README`` yields ``widget-1.2``.
    """
    lines = (output or "").splitlines()
    first_line = lines[0].strip() if lines else ""
    if first_line.startswith("x "):  # bsdtar prefixes members with "x "
        first_line = first_line[2:].strip()

    while first_line.startswith("./"):
        first_line = first_line[2:]

    segment = first_line.split("/", 1)[0]
    if not segment:
        raise FetchParseError(
            f"Could not find an extracted directory in output: {_excerpt(output)}"
        )
    return segment


def url_filename(url: str) -> str:
    """Basename of the path component of ``url``."""
    name = PurePosixPath(unquote(urlparse(url).path)).name
    if not name:
        raise FetchParseError(f"Cannot derive a file name from URL: {url}")
    return name


def _excerpt(output: str | None, limit: int = 120) -> str:
    text = (output or "").strip()
    if not text:
        return "<empty>"
    return text if len(text) <= limit else text[:limit] + "..."
