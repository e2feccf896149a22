"""Error hierarchy for backup operations."""
from __future__ import annotations


class BackupError(RuntimeError):
    """Base exception for backup related failures."""


class SourceMissingError(BackupError):
    """Raised when a configured backup source does not exist."""


class ManifestError(BackupError):
    """Base class for manifest read failures."""


class ManifestMissingError(ManifestError):
    """Raised when a snapshot has no manifest."""


class ManifestMalformedError(ManifestError):
    """Raised when a manifest is not valid JSON or misses required fields."""


class BackupVerificationError(BackupError):
    """Raised when verification of a snapshot fails."""


class IntegrityMismatchError(BackupVerificationError):
    """Raised when the recomputed digest differs from the manifest checksum."""

    def __init__(self, snapshot: str, expected: str, actual: str) -> None:
        super().__init__(f"integrity check failed for {snapshot}: expected {expected}, got {actual}")
        self.snapshot = snapshot
        self.expected = expected
        self.actual = actual


class NoSnapshotAvailableError(BackupError):
    """Raised when the backup root holds no snapshot."""


class BackupIOError(BackupError):
    """Raised when a filesystem operation fails mid-operation."""


class BackupLockedError(BackupError):
    """Raised when another invocation holds the backup root lock."""


__all__ = [
    "BackupError",
    "BackupIOError",
    "BackupLockedError",
    "BackupVerificationError",
    "IntegrityMismatchError",
    "ManifestError",
    "ManifestMalformedError",
    "ManifestMissingError",
    "NoSnapshotAvailableError",
    "SourceMissingError",
]
