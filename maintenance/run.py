from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from core.logging_utils import configure_json_logging
from core.paths import resolve_working_dir
from core.settings import load_settings

from .cleanup import CleanupReport, run_daily_cleanup

LOGGER = logging.getLogger("appops.maintenance.cli")


def format_report(report: CleanupReport) -> str:
    lines = [f"[{report.timestamp}] {report.message}"]
    for area, names in report.removed.items():
        lines.append(f" - {area}: removed {len(names)} file(s)")
    return "\n".join(lines)


def cli(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="appops-cleanup", description="Prune old logs, temp files and reports")
    parser.add_argument("--json", action="store_true", help="Output report as JSON")
    parser.add_argument(
        "--working-dir",
        type=Path,
        default=None,
        help="Override working directory",
    )
    args = parser.parse_args(argv)
    working_dir = resolve_working_dir(args.working_dir)
    try:
        configure_json_logging(working_dir)
        report = run_daily_cleanup(working_dir, load_settings(working_dir))
    except OSError as exc:
        LOGGER.error("cleanup failed: %s", exc)
        print(f"Cleanup failed: {exc}", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
