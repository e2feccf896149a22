"""Snapshot backups of the application tree."""
from __future__ import annotations

from .api import BackupManager
from .catalog import BackupCatalog
from .errors import (
    BackupError,
    IntegrityMismatchError,
    ManifestMalformedError,
    ManifestMissingError,
    NoSnapshotAvailableError,
)
from .manifest import Manifest, ManifestStore, UploadLog
from .types import BackedUpItem, BackupResult, RetentionPolicy, RetentionSummary, VerifyResult

__all__ = [
    "BackedUpItem",
    "BackupCatalog",
    "BackupError",
    "BackupManager",
    "BackupResult",
    "IntegrityMismatchError",
    "Manifest",
    "ManifestMalformedError",
    "ManifestMissingError",
    "ManifestStore",
    "NoSnapshotAvailableError",
    "RetentionPolicy",
    "RetentionSummary",
    "UploadLog",
    "VerifyResult",
]
