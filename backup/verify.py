"""Verify backup snapshots."""
from __future__ import annotations

from pathlib import Path

from .digest import iter_tree_files, tree_digest
from .errors import IntegrityMismatchError
from .logs import BackupLogger
from .manifest import ManifestStore
from .types import VerifyResult


def verify_backup(snapshot: Path, *, store: ManifestStore, logger: BackupLogger) -> VerifyResult:
    snapshot = Path(snapshot)
    manifest = store.read(snapshot)
    actual = tree_digest(snapshot)
    if actual != manifest.checksum:
        logger.event(
            event="backup_verified",
            phase="verify",
            ok=False,
            name=snapshot.name,
            expected=manifest.checksum,
            actual=actual,
        )
        raise IntegrityMismatchError(snapshot.name, manifest.checksum, actual)

    file_count = len(iter_tree_files(snapshot))
    logger.event(event="backup_verified", phase="verify", ok=True, name=snapshot.name, files=file_count)
    return VerifyResult(
        name=snapshot.name,
        directory=snapshot,
        checksum=actual,
        file_count=file_count,
    )


__all__ = ["verify_backup"]
