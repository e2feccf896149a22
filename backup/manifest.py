"""Read and write snapshot manifests and upload logs."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ManifestMalformedError, ManifestMissingError

MANIFEST_FILENAME = "manifest.json"
UPLOAD_LOG_FILENAME = "upload-log.json"
_TEMP_SUFFIX = ".tmp"
# Top-level snapshot files written after the checksum is taken.
METADATA_FILENAMES = frozenset(
    {
        MANIFEST_FILENAME,
        MANIFEST_FILENAME + _TEMP_SUFFIX,
        UPLOAD_LOG_FILENAME,
        UPLOAD_LOG_FILENAME + _TEMP_SUFFIX,
    }
)


class Manifest(BaseModel):
    """Descriptor stored as ``manifest.json`` in every snapshot."""

    timestamp: str = Field(..., description="Snapshot creation time, ISO-8601 UTC.")
    version: str = Field(..., description="Manifest schema version.")
    files: List[str] = Field(default_factory=list, description="Item names copied into the snapshot.")
    checksum: str = Field(..., description="SHA-256 hex digest of the snapshot payload.")


class UploadLog(BaseModel):
    """Record of a simulated remote placement, stored as ``upload-log.json``."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    backup_path: str = Field(..., alias="backupPath")
    status: str
    url: str


_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _write_json_atomic(target: Path, payload: dict) -> None:
    tmp = target.with_name(target.name + _TEMP_SUFFIX)
    try:
        with open(tmp, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class ManifestStore:
    """Serialize manifests and upload logs inside snapshot directories."""

    def manifest_path(self, snapshot: Path) -> Path:
        return Path(snapshot) / MANIFEST_FILENAME

    def upload_log_path(self, snapshot: Path) -> Path:
        return Path(snapshot) / UPLOAD_LOG_FILENAME

    def write(self, snapshot: Path, manifest: Manifest) -> Path:
        path = self.manifest_path(snapshot)
        _write_json_atomic(path, manifest.model_dump())
        return path

    def read(self, snapshot: Path) -> Manifest:
        return self._read(self.manifest_path(snapshot), Manifest, label="manifest")

    def write_upload_log(self, snapshot: Path, record: UploadLog) -> Path:
        path = self.upload_log_path(snapshot)
        _write_json_atomic(path, record.model_dump(by_alias=True))
        return path

    def read_upload_log(self, snapshot: Path) -> UploadLog:
        return self._read(self.upload_log_path(snapshot), UploadLog, label="upload log")

    def _read(self, path: Path, model: Type[_ModelT], *, label: str) -> _ModelT:
        if not path.exists():
            raise ManifestMissingError(f"{label} not found at {path}")
        data = path.read_bytes()
        try:
            return model.model_validate_json(data.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise ManifestMalformedError(f"invalid {label} at {path}: not UTF-8 encoded") from exc
        except ValidationError as exc:
            raise ManifestMalformedError(f"invalid {label} at {path}: {exc.error_count()} error(s)") from exc


__all__ = [
    "MANIFEST_FILENAME",
    "METADATA_FILENAMES",
    "UPLOAD_LOG_FILENAME",
    "Manifest",
    "ManifestStore",
    "UploadLog",
]
