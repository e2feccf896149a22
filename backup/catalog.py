"""Enumerate snapshots under a backup root and enforce retention."""
from __future__ import annotations

import contextlib
import json
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from .errors import BackupLockedError, NoSnapshotAvailableError
from .logs import BackupLogger
from .types import RetentionPolicy, RetentionSummary

SNAPSHOT_PREFIX = "backup-"
LOCK_FILENAME = ".lock"


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """Return *moment* (default: now) as ISO-8601 UTC with milliseconds and ``Z``."""

    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def snapshot_name(now: Optional[datetime] = None) -> str:
    """Return a snapshot directory name embedding *now*.

    The timestamp has ``:`` and ``.`` replaced by ``-`` so names sort
    chronologically, e.g. ``backup-2024-05-01T12-30-00-123Z``.
    """

    stamp = iso_timestamp(now)
    return SNAPSHOT_PREFIX + stamp.replace(":", "-").replace(".", "-")


def _directory_size(path: Path) -> int:
    total = 0
    for item in path.rglob("*"):
        if item.is_file():
            total += item.stat().st_size
    return total


class BackupCatalog:
    """Snapshots are the directories of the backup root, ordered by name."""

    def __init__(self, root: Path, *, logger: Optional[BackupLogger] = None) -> None:
        self._root = Path(root)
        self._logger = logger

    @property
    def root(self) -> Path:
        return self._root

    def list_snapshots(self) -> List[Path]:
        if not self._root.exists():
            return []
        items = [
            child
            for child in self._root.iterdir()
            if child.is_dir() and not child.name.startswith((".", "_"))
        ]
        items.sort(key=lambda child: child.name)
        return items

    def latest(self) -> Path:
        snapshots = self.list_snapshots()
        if not snapshots:
            raise NoSnapshotAvailableError(f"no backup found in {self._root}")
        return snapshots[-1]

    def apply_retention(self, policy: RetentionPolicy) -> RetentionSummary:
        """Delete the oldest snapshots so at most ``policy.keep_last`` remain."""

        snapshots = self.list_snapshots()
        keep_last = max(int(policy.keep_last), 0)
        excess = len(snapshots) - keep_last
        doomed = snapshots[:excess] if excess > 0 else []

        removed: List[str] = []
        freed = 0
        for path in doomed:
            size = _directory_size(path)
            shutil.rmtree(path)
            removed.append(path.name)
            freed += size
            if self._logger is not None:
                self._logger.warning("backup_removed", name=path.name, reason="retention", bytes=size)

        kept = [path.name for path in snapshots if path.name not in removed]
        return RetentionSummary(removed=removed, kept=kept, freed_bytes=freed)

    @contextlib.contextmanager
    def lock(self) -> Iterator[Path]:
        """Hold an advisory lock file on the backup root.

        Only invocations that also take the lock are excluded; a stale lock
        left by a crashed process must be removed by hand.
        """

        self._root.mkdir(parents=True, exist_ok=True)
        lock_path = self._root / LOCK_FILENAME
        try:
            fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as exc:
            raise BackupLockedError(f"backup root is locked by another run ({lock_path})") from exc
        try:
            payload = {"pid": os.getpid(), "ts": datetime.now(timezone.utc).isoformat()}
            os.write(fd, json.dumps(payload).encode("utf-8"))
        finally:
            os.close(fd)
        try:
            yield lock_path
        finally:
            lock_path.unlink(missing_ok=True)


__all__ = ["BackupCatalog", "LOCK_FILENAME", "SNAPSHOT_PREFIX", "iso_timestamp", "snapshot_name"]
