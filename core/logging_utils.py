"""Process-wide JSON line logging rooted at the working directory."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from .paths import get_logs_dir

LOG_FILENAME = "appops.log.jsonl"

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JsonLogFormatter(logging.Formatter):
    """Render a record as one JSON object with its ``extra`` fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {
            key: _json_safe(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        for key, value in extras.items():
            payload.setdefault(key, value)
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_json_logging(working_dir: Path, name: str = "appops") -> logging.Logger:
    """Route *name* and its children to ``<working_dir>/logs/appops.log.jsonl``.

    A handler left over from a previous working directory is closed and
    replaced; calling this twice for the same directory is a no-op.
    """

    target = get_logs_dir(working_dir) / LOG_FILENAME
    target.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    current = None
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.FileHandler) or not isinstance(handler.formatter, JsonLogFormatter):
            continue
        if Path(handler.baseFilename).resolve() == target.resolve() and current is None:
            current = handler
            continue
        logger.removeHandler(handler)
        handler.close()

    if current is None:
        current = logging.FileHandler(target, encoding="utf-8")
        current.setFormatter(JsonLogFormatter())
        logger.addHandler(current)
    return logger


__all__ = ["JsonLogFormatter", "LOG_FILENAME", "configure_json_logging"]
