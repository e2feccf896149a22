"""Content digest over a snapshot directory tree."""
from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Iterator, List

from .manifest import METADATA_FILENAMES

_CHUNK_BYTES = 1024 * 1024


def _walk(directory: Path) -> Iterator[Path]:
    for item in sorted(directory.iterdir(), key=lambda entry: entry.name):
        if item.is_dir():
            yield from _walk(item)
        elif item.is_file():
            yield item


def iter_tree_files(directory: Path, *, exclude: Iterable[str] = METADATA_FILENAMES) -> List[Path]:
    """Return the payload files under *directory* in digest order.

    Entries are visited depth-first, sorted by name at every level. Names in
    *exclude* are skipped only at the top level of *directory*.
    """

    directory = Path(directory)
    excluded = set(exclude)
    files: List[Path] = []
    for path in _walk(directory):
        if path.parent == directory and path.name in excluded:
            continue
        files.append(path)
    return files


def tree_digest(directory: Path, *, exclude: Iterable[str] = METADATA_FILENAMES) -> str:
    """Return the SHA-256 hex digest of every payload file's bytes.

    Only file content feeds the hash; names, timestamps and permissions do
    not. Because of that the walk order matters, and it is fixed by sorting.
    """

    digest = hashlib.sha256()
    for path in iter_tree_files(directory, exclude=exclude):
        with path.open("rb") as handle:
            for chunk in iter(lambda: handle.read(_CHUNK_BYTES), b""):
                digest.update(chunk)
    return digest.hexdigest()


__all__ = [
    "iter_tree_files",
    "tree_digest",
]
