"""Daily housekeeping of logs, temp files and reports."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from core.paths import get_logs_dir, get_reports_dir, get_temp_dir, resolve_path
from core.settings import DEFAULT_SETTINGS

LOGGER = logging.getLogger("appops.maintenance")


@dataclass(slots=True)
class CleanupReport:
    timestamp: str
    status: str
    message: str
    removed: Dict[str, List[str]] = field(default_factory=dict)
    path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "status": self.status,
            "message": self.message,
            "removed": self.removed,
        }


def prune_old_files(directory: Path, *, max_age_days: int, now: Optional[datetime] = None) -> List[str]:
    """Delete regular files in *directory* last modified before the cutoff."""

    if not directory.exists():
        LOGGER.info("cleanup_skipped", extra={"directory": str(directory), "reason": "missing"})
        return []
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=max_age_days)
    threshold = cutoff.timestamp()
    removed: List[str] = []
    for item in sorted(directory.iterdir()):
        if not item.is_file():
            continue
        if item.stat().st_mtime < threshold:
            item.unlink()
            removed.append(item.name)
            LOGGER.info("cleanup_removed", extra={"path": str(item)})
    return removed


def clear_directory(directory: Path) -> List[str]:
    """Delete every regular file in *directory*; subdirectories are left alone."""

    if not directory.exists():
        LOGGER.info("cleanup_skipped", extra={"directory": str(directory), "reason": "missing"})
        return []
    removed: List[str] = []
    for item in sorted(directory.iterdir()):
        if not item.is_file():
            continue
        item.unlink()
        removed.append(item.name)
        LOGGER.info("cleanup_removed", extra={"path": str(item)})
    return removed


def _directory(config: Dict[str, Any], key: str, working_dir: Path, default: Callable[[Path], Path]) -> Path:
    value = config.get(key)
    if value:
        return resolve_path(value, working_dir)
    return default(working_dir)


def _maintenance_settings(settings: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    merged = dict(DEFAULT_SETTINGS["maintenance"])
    raw = (settings or {}).get("maintenance")
    if isinstance(raw, dict):
        merged.update(raw)
    return merged


def run_daily_cleanup(
    working_dir: Path,
    settings: Optional[Dict[str, Any]] = None,
    *,
    now: Optional[datetime] = None,
) -> CleanupReport:
    config = _maintenance_settings(settings)
    moment = now or datetime.now(timezone.utc)
    logs_dir = _directory(config, "logs_dir", working_dir, get_logs_dir)
    temp_dir = _directory(config, "temp_dir", working_dir, get_temp_dir)
    reports_dir = _directory(config, "reports_dir", working_dir, get_reports_dir)

    removed = {
        "logs": prune_old_files(logs_dir, max_age_days=int(config["logs_keep_days"]), now=moment),
        "temp": clear_directory(temp_dir),
        "reports": prune_old_files(reports_dir, max_age_days=int(config["reports_keep_days"]), now=moment),
    }
    report = CleanupReport(
        timestamp=moment.isoformat(),
        status="success",
        message="Daily cleanup completed successfully",
        removed=removed,
    )

    reports_dir.mkdir(parents=True, exist_ok=True)
    target = reports_dir / f"cleanup-{moment.date().isoformat()}.json"
    with target.open("w", encoding="utf-8") as handle:
        json.dump(report.to_dict(), handle, indent=2)
    report.path = target
    LOGGER.info(
        "cleanup_complete",
        extra={key: len(names) for key, names in removed.items()},
    )
    return report


__all__ = ["CleanupReport", "clear_directory", "prune_old_files", "run_daily_cleanup"]
