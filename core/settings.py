from __future__ import annotations

import copy
import json
import time
from pathlib import Path
from typing import Any, Dict

from .paths import get_logs_dir, get_settings_path
from .settings_schema import SETTINGS_VALIDATOR

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_VERSION",
    "load_settings",
    "merge_defaults",
]

SETTINGS_VERSION = 1


DEFAULT_SETTINGS: Dict[str, Any] = {
    "version": SETTINGS_VERSION,
    "backup": {
        "root": None,
        "manifest_version": "1.0.0",
        "items": [
            {"src": "src", "dest": "src"},
            {"src": "public", "dest": "public"},
            {"src": "package.json", "dest": "package.json"},
            {"src": "run.js", "dest": "run.js"},
        ],
        "retention": {
            "keep_last": 10,
        },
        "upload": {
            "url": "https://example-bucket.s3.amazonaws.com/backups/",
        },
    },
    "maintenance": {
        "logs_dir": None,
        "logs_keep_days": 7,
        "temp_dir": None,
        "reports_dir": None,
        "reports_keep_days": 30,
    },
}


def merge_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    def _merge(default: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in default.items():
            if isinstance(value, dict):
                current = payload.get(key)
                if isinstance(current, dict):
                    result[key] = _merge(value, current)
                else:
                    result[key] = _merge(value, {})
            elif isinstance(value, list):
                current = payload.get(key)
                result[key] = copy.deepcopy(current if isinstance(current, list) else value)
            else:
                result[key] = payload.get(key, value)
        for key, value in payload.items():
            if key not in result:
                result[key] = value
        return result

    return _merge(DEFAULT_SETTINGS, data or {})


def _log_unknown_keys(settings: Dict[str, Any], working_dir: Path) -> None:
    unknown = list(SETTINGS_VALIDATOR.unknown_keys(settings))
    if not unknown:
        return
    logs_dir = get_logs_dir(working_dir)
    payload = {
        "ts": time.time(),
        "unknown": unknown,
    }
    target = logs_dir / "settings_unknown.json"
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
    except OSError:
        return


def load_settings(working_dir: Path) -> Dict[str, Any]:
    """Load ``settings.json`` from *working_dir* merged over the defaults."""

    data: Dict[str, Any] = {}
    candidate = get_settings_path(working_dir)
    try:
        with open(candidate, "r", encoding="utf-8") as handle:
            loaded = json.load(handle)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        loaded = None
    if isinstance(loaded, dict):
        data = loaded
    merged = merge_defaults(data)
    merged.setdefault("working_dir", str(working_dir))
    _log_unknown_keys(merged, working_dir)
    return merged

