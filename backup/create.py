"""Create backup snapshots."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from .catalog import iso_timestamp, snapshot_name
from .copier import copy_path
from .digest import tree_digest
from .errors import BackupError
from .logs import BackupLogger
from .manifest import Manifest, ManifestStore
from .types import BackedUpItem, BackupResult

_MAX_COLLISIONS = 99


def _claim_directory(root: Path, name: str) -> Path:
    """Create a fresh snapshot directory, suffixing ``-01``, ``-02``... on name clashes.

    Suffixed names still sort after the plain name and before the next millisecond.
    """

    root.mkdir(parents=True, exist_ok=True)
    candidates = [name] + [f"{name}-{index:02d}" for index in range(1, _MAX_COLLISIONS + 1)]
    for candidate in candidates:
        target = root / candidate
        try:
            target.mkdir()
        except FileExistsError:
            continue
        return target
    raise BackupError(f"could not allocate a snapshot directory for {name} in {root}")


def create_backup(
    root: Path,
    items: Sequence[BackedUpItem],
    *,
    store: ManifestStore,
    logger: BackupLogger,
    manifest_version: str,
    now: Optional[datetime] = None,
) -> BackupResult:
    moment = now or datetime.now(timezone.utc)
    backup_dir = _claim_directory(Path(root), snapshot_name(moment))
    name = backup_dir.name

    logger.event(event="backup_start", phase="create", ok=True, name=name)

    copied: List[str] = []
    skipped: List[str] = []
    for item in items:
        if not item.source.exists():
            skipped.append(item.dest)
            logger.warning("source_missing", source=str(item.source), dest=item.dest)
            continue
        count = copy_path(item.source, backup_dir / item.dest)
        copied.append(item.dest)
        logger.info("copy_item", source=str(item.source), dest=item.dest, files=count)

    # The checksum must be taken before any metadata file lands in the snapshot.
    checksum = tree_digest(backup_dir)
    manifest = Manifest(
        timestamp=iso_timestamp(moment),
        version=manifest_version,
        files=copied,
        checksum=checksum,
    )
    manifest_path = store.write(backup_dir, manifest)

    logger.event(event="backup_complete", phase="create", ok=True, name=name, files=len(copied), checksum=checksum)

    return BackupResult(
        name=name,
        directory=backup_dir,
        manifest_path=manifest_path,
        manifest=manifest,
        skipped=skipped,
    )


__all__ = ["create_backup"]
