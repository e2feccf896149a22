from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

__all__ = [
    "get_backup_root",
    "get_logs_dir",
    "get_reports_dir",
    "get_settings_path",
    "get_temp_dir",
    "resolve_path",
    "resolve_working_dir",
]

_HOME_ENV = "APPOPS_HOME"


def _expand_path(value: str) -> Path:
    expanded = os.path.expandvars(os.path.expanduser(value))
    return Path(expanded).resolve()


def resolve_working_dir(override: Optional[Path] = None) -> Path:
    """Return the application root the operational tools act on.

    An explicit *override* wins, then the ``APPOPS_HOME`` environment
    variable, then the current directory. The directory is not created.
    """

    if override is not None:
        return _expand_path(str(override))
    env_home = os.environ.get(_HOME_ENV)
    if env_home and env_home.strip():
        return _expand_path(env_home)
    return Path.cwd().resolve()


def resolve_path(value: str | os.PathLike[str], working_dir: Path) -> Path:
    """Resolve *value* against *working_dir* unless it is already absolute."""

    path = Path(os.path.expandvars(os.path.expanduser(str(value))))
    if path.is_absolute():
        return path
    return working_dir / path


def get_settings_path(working_dir: Path) -> Path:
    return working_dir / "settings.json"


def get_logs_dir(working_dir: Path) -> Path:
    return working_dir / "logs"


def get_temp_dir(working_dir: Path) -> Path:
    return working_dir / "temp"


def get_reports_dir(working_dir: Path) -> Path:
    return working_dir / "reports"


def get_backup_root(working_dir: Path) -> Path:
    return working_dir / "backup"
