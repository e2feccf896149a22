"""Copy backup sources into a snapshot directory."""
from __future__ import annotations

import shutil
from pathlib import Path

from .errors import SourceMissingError


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _copy_file(source: Path, dest: Path) -> int:
    _ensure_parent(dest)
    shutil.copy2(source, dest)
    return 1


def _copy_directory(source: Path, dest: Path) -> int:
    dest.mkdir(parents=True, exist_ok=True)
    copied = 0
    for item in sorted(source.iterdir()):
        target = dest / item.name
        if item.is_dir():
            copied += _copy_directory(item, target)
        else:
            copied += _copy_file(item, target)
    return copied


def copy_path(source: Path, destination: Path) -> int:
    """Copy a file or a whole directory tree to *destination*.

    Directories are recreated with their relative layout, intermediate
    directories included. Returns the number of files written. Raises
    :class:`SourceMissingError` when *source* does not exist; callers that
    treat a source as optional should check before copying.
    """

    source = Path(source)
    destination = Path(destination)
    if not source.exists():
        raise SourceMissingError(f"backup source not found: {source}")
    if source.is_dir():
        return _copy_directory(source, destination)
    return _copy_file(source, destination)


__all__ = ["copy_path"]
