"""
The sanitization boundary for source paths taken from explorer data.

Relative paths inside a compiler input come from a third party and are not
cryptographically verified, so every one of them is confined to its
destination root here before it reaches the filesystem layer.
"""

import re
from pathlib import Path
from typing import Dict, Mapping

from .domain import SourceFile
from .exceptions import PathCollisionError, UnsafePathError

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


def resolve_destination(root: Path, relative_path: str) -> Path:
    """
    Confines a relative path from explorer data to a location under root.

    Backslashes count as separators, and empty or `.` segments are dropped.
    Absolute paths, drive prefixes, NUL bytes, lone surrogates, `..`
    segments and paths ending in a separator are rejected outright rather
    than normalized away.

    Raises:
        UnsafePathError: If the path could point outside root.
    """

    if "\x00" in relative_path:
        raise UnsafePathError(relative_path, "contains a NUL byte")

    try:
        relative_path.encode("utf-8")
    except UnicodeEncodeError:
        raise UnsafePathError(relative_path, "is not valid UTF-8") from None

    cleaned = relative_path.replace("\\", "/")
    if cleaned.startswith("/") or _DRIVE_PREFIX.match(cleaned):
        raise UnsafePathError(relative_path, "is absolute")

    segments = cleaned.split("/")
    parts = [part for part in segments if part not in ("", ".")]
    if ".." in parts:
        raise UnsafePathError(relative_path, "contains a parent-directory segment")
    if not parts:
        raise UnsafePathError(relative_path, "is empty")
    if segments[-1] in ("", "."):
        raise UnsafePathError(relative_path, "names a directory, not a file")

    return root.joinpath(*parts)


def plan_destinations(
    root: Path, sources: Mapping[str, SourceFile]
) -> Dict[Path, SourceFile]:
    """
    Resolves every source path before anything is written.

    Raises:
        UnsafePathError: If any path is unsafe.
        PathCollisionError: If two paths resolve to the same destination.
    """

    plan: Dict[Path, SourceFile] = {}
    origins: Dict[Path, str] = {}

    for relative_path, source in sources.items():
        destination = resolve_destination(root, relative_path)
        if destination in plan:
            raise PathCollisionError(
                destination, [origins[destination], relative_path]
            )
        plan[destination] = source
        origins[destination] = relative_path

    return plan
