"""Common dataclasses shared across backup modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping

from .manifest import METADATA_FILENAMES, Manifest


@dataclass(slots=True)
class BackedUpItem:
    """Source path copied into every snapshot under ``dest``."""

    source: Path
    dest: str

    @classmethod
    def from_setting(cls, entry: Mapping[str, Any], working_dir: Path) -> "BackedUpItem":
        src = entry.get("src")
        dest = entry.get("dest") or (Path(str(src)).name if src else None)
        if not src or not dest:
            raise ValueError(f"backup item needs 'src' and 'dest': {dict(entry)!r}")
        if str(dest) in METADATA_FILENAMES:
            raise ValueError(f"backup item destination {dest!r} is reserved for snapshot metadata")
        source = Path(str(src))
        if not source.is_absolute():
            source = working_dir / source
        return cls(source=source, dest=str(dest))


@dataclass(slots=True)
class RetentionPolicy:
    keep_last: int = 10


@dataclass(slots=True)
class BackupResult:
    name: str
    directory: Path
    manifest_path: Path
    manifest: Manifest
    skipped: List[str] = field(default_factory=list)


@dataclass(slots=True)
class VerifyResult:
    name: str
    directory: Path
    checksum: str
    file_count: int


@dataclass(slots=True)
class RetentionSummary:
    removed: List[str]
    kept: List[str]
    freed_bytes: int


__all__ = [
    "BackedUpItem",
    "BackupResult",
    "RetentionPolicy",
    "RetentionSummary",
    "VerifyResult",
]
