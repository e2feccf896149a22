"""Routine pruning of logs, temp files and reports."""
from __future__ import annotations

from .cleanup import CleanupReport, clear_directory, prune_old_files, run_daily_cleanup

__all__ = ["CleanupReport", "clear_directory", "prune_old_files", "run_daily_cleanup"]
