"""Append-only event journal for backup runs.

Every entry is one JSON object per line in ``logs/backup.jsonl`` under the
working directory. Entries are mirrored to the ``appops.backup`` logger so
that the process-wide JSON log (see :mod:`core.logging_utils`) carries the
same events with the journal entry attached under the ``backup`` key.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.paths import get_logs_dir

LOGGER = logging.getLogger("appops.backup")

JOURNAL_FILENAME = "backup.jsonl"


def _utc_stamp() -> str:
    moment = datetime.now(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class BackupLogger:
    """Journal of backup events for one working directory.

    ``command`` is stamped onto every entry when given, so a journal shared by
    several CLI invocations can be split per run.
    """

    def __init__(self, working_dir: Path, *, command: Optional[str] = None) -> None:
        self._journal = get_logs_dir(Path(working_dir)) / JOURNAL_FILENAME
        self._command = command

    @property
    def log_path(self) -> Path:
        return self._journal

    def record(self, event: str, *, ok: bool, level: int, **fields: Any) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"ts": _utc_stamp(), "event": event, "ok": bool(ok)}
        if self._command:
            entry["command"] = self._command
        entry.update(fields)
        self._journal.parent.mkdir(parents=True, exist_ok=True)
        with self._journal.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(entry, sort_keys=True, default=str))
            handle.write("\n")
        LOGGER.log(level, event, extra={"backup": entry})
        return entry

    def event(self, *, event: str, phase: str, ok: bool, **extra: Any) -> Dict[str, Any]:
        level = logging.INFO if ok else logging.ERROR
        return self.record(event, ok=ok, level=level, phase=phase, **extra)

    def info(self, event: str, **extra: Any) -> Dict[str, Any]:
        return self.record(event, ok=True, level=logging.INFO, **extra)

    def warning(self, event: str, **extra: Any) -> Dict[str, Any]:
        return self.record(event, ok=False, level=logging.WARNING, **extra)

    def error(self, event: str, **extra: Any) -> Dict[str, Any]:
        return self.record(event, ok=False, level=logging.ERROR, **extra)

    def records(self, *, event: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return journal entries in write order, optionally filtered by event name.

        Lines that do not decode to a JSON object are skipped.
        """

        if not self._journal.exists():
            return []
        entries: List[Dict[str, Any]] = []
        with self._journal.open("r", encoding="utf-8", errors="replace") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if not isinstance(entry, dict):
                    continue
                if event is not None and entry.get("event") != event:
                    continue
                entries.append(entry)
        return entries


__all__ = ["BackupLogger", "JOURNAL_FILENAME"]
