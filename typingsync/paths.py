"""
Typing identifiers - canonical, platform-independent relative paths.

Every declaration file is identified by its path relative to the project's
typings directory, with forward slashes. Catalog entries and scanned files
both go through ``canonical_typing_id`` so set comparisons never depend on
the host's path separator.
"""

import os
import posixpath
from pathlib import Path

__all__ = ["canonical_typing_id", "relative_typing_id", "resolve_typing_path"]


def canonical_typing_id(typing_file: str) -> str:
    """Normalize a relative typing path: forward slashes, no "./" or "//"."""
    normalized = posixpath.normpath(typing_file.replace("\\", "/"))
    return "" if normalized == "." else normalized


def relative_typing_id(target_dir: Path, file_path: Path) -> str:
    """Identifier of a file found on disk, relative to target_dir."""
    return canonical_typing_id(os.path.relpath(file_path, target_dir))


def resolve_typing_path(target_dir: Path, typing_file: str) -> Path:
    """Absolute path of a typing file under target_dir.

    Raises:
        ValueError: If the identifier is empty, absolute or escapes target_dir
    """
    typing_id = canonical_typing_id(typing_file)
    if not typing_id or posixpath.isabs(typing_id) or typing_id.split("/")[0] == "..":
        raise ValueError(f"Typing file {typing_file!r} is outside the typings directory")
    return target_dir.joinpath(*typing_id.split("/"))
