"""Simulated upload of a snapshot to remote storage.

No bytes leave the machine: the stub only records where the snapshot
would have been placed. A real transfer has to stream the snapshot,
compare the remote digest with the manifest checksum and retry transient
failures before it can replace :func:`upload_backup`.
"""
from __future__ import annotations

from pathlib import Path

from .catalog import iso_timestamp
from .errors import NoSnapshotAvailableError
from .logs import BackupLogger
from .manifest import ManifestStore, UploadLog

UPLOAD_STATUS = "uploaded"


def upload_backup(snapshot: Path, *, url: str, store: ManifestStore, logger: BackupLogger) -> UploadLog:
    snapshot = Path(snapshot)
    if not snapshot.is_dir():
        raise NoSnapshotAvailableError(f"backup {snapshot} not found")
    logger.info("upload_simulated", name=snapshot.name, url=url)
    record = UploadLog(
        timestamp=iso_timestamp(),
        backup_path=str(snapshot),
        status=UPLOAD_STATUS,
        url=url,
    )
    store.write_upload_log(snapshot, record)
    logger.event(event="backup_uploaded", phase="upload", ok=True, name=snapshot.name)
    return record


__all__ = ["UPLOAD_STATUS", "upload_backup"]
