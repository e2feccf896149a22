"""Public API for backup operations."""
from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from core.paths import get_backup_root, resolve_path, resolve_working_dir
from core.settings import DEFAULT_SETTINGS, load_settings

from .catalog import BackupCatalog
from .create import create_backup
from .errors import BackupError, BackupIOError
from .logs import BackupLogger
from .manifest import ManifestStore, UploadLog
from .types import BackedUpItem, BackupResult, RetentionPolicy, RetentionSummary, VerifyResult
from .upload import upload_backup
from .verify import verify_backup


class BackupManager:
    """Coordinate snapshot creation, upload, verification and retention."""

    def __init__(
        self,
        *,
        working_dir: Optional[Path] = None,
        settings: Optional[Dict[str, Any]] = None,
        backup_root: Optional[Path] = None,
        logger: Optional[BackupLogger] = None,
    ) -> None:
        self._working_dir = resolve_working_dir(working_dir)
        if settings is None:
            settings = load_settings(self._working_dir)
        self._settings = dict(settings)
        self._logger = logger or BackupLogger(self._working_dir)
        self._store = ManifestStore()
        root = backup_root if backup_root is not None else self._backup_settings().get("root")
        if root:
            self._backup_root = resolve_path(root, self._working_dir)
        else:
            self._backup_root = get_backup_root(self._working_dir)
        self._catalog = BackupCatalog(self._backup_root, logger=self._logger)

    # ------------------------------------------------------------------
    @property
    def working_dir(self) -> Path:
        return self._working_dir

    @property
    def backup_root(self) -> Path:
        return self._backup_root

    @property
    def catalog(self) -> BackupCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    def _backup_settings(self) -> Dict[str, Any]:
        raw = self._settings.get("backup")
        return raw if isinstance(raw, dict) else {}

    def _items(self) -> List[BackedUpItem]:
        raw = self._backup_settings().get("items")
        if not isinstance(raw, list):
            raw = DEFAULT_SETTINGS["backup"]["items"]
        return [BackedUpItem.from_setting(entry, self._working_dir) for entry in raw if isinstance(entry, dict)]

    def _retention_policy(self) -> RetentionPolicy:
        raw = self._backup_settings().get("retention")
        retention = raw if isinstance(raw, dict) else {}
        return RetentionPolicy(keep_last=int(retention.get("keep_last", 10) or 0))

    def _upload_url(self) -> str:
        raw = self._backup_settings().get("upload")
        upload = raw if isinstance(raw, dict) else {}
        return str(upload.get("url") or DEFAULT_SETTINGS["backup"]["upload"]["url"])

    def _manifest_version(self) -> str:
        return str(self._backup_settings().get("manifest_version") or DEFAULT_SETTINGS["backup"]["manifest_version"])

    @contextlib.contextmanager
    def _io_guard(self, phase: str) -> Iterator[None]:
        try:
            yield
        except BackupError as exc:
            self._logger.error("backup_failed", phase=phase, error=str(exc), kind=type(exc).__name__)
            raise
        except OSError as exc:
            self._logger.error("backup_failed", phase=phase, error=str(exc), kind="BackupIOError")
            raise BackupIOError(f"{phase} failed: {exc}") from exc

    # ------------------------------------------------------------------
    def list_snapshots(self) -> List[Path]:
        return self._catalog.list_snapshots()

    # ------------------------------------------------------------------
    def create(self) -> BackupResult:
        items = self._items()
        with self._io_guard("create"), self._catalog.lock():
            return create_backup(
                self._backup_root,
                items,
                store=self._store,
                logger=self._logger,
                manifest_version=self._manifest_version(),
            )

    # ------------------------------------------------------------------
    def upload(self, snapshot: Optional[Path] = None) -> UploadLog:
        with self._io_guard("upload"):
            target = Path(snapshot) if snapshot is not None else self._catalog.latest()
            return upload_backup(target, url=self._upload_url(), store=self._store, logger=self._logger)

    # ------------------------------------------------------------------
    def verify(self, snapshot: Optional[Path] = None) -> VerifyResult:
        with self._io_guard("verify"):
            target = Path(snapshot) if snapshot is not None else self._catalog.latest()
            return verify_backup(target, store=self._store, logger=self._logger)

    # ------------------------------------------------------------------
    def cleanup(self) -> RetentionSummary:
        policy = self._retention_policy()
        with self._io_guard("cleanup"), self._catalog.lock():
            summary = self._catalog.apply_retention(policy)
        self._logger.event(
            event="retention_applied",
            phase="cleanup",
            ok=True,
            removed=len(summary.removed),
            kept=len(summary.kept),
        )
        return summary


__all__ = ["BackupManager"]
