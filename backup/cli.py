from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from core.logging_utils import configure_json_logging
from core.paths import resolve_working_dir

from .api import BackupManager
from .errors import BackupError
from .logs import BackupLogger

LOGGER = logging.getLogger("appops.backup.cli")

COMMANDS = ("create", "upload", "verify", "cleanup")

USAGE = """\
Available backup commands:
  create  - Create a new backup
  upload  - Upload latest backup to cloud storage
  verify  - Verify backup integrity
  cleanup - Clean up old backups

Usage: appops-backup <command> [--working-dir DIR] [--backup-root DIR] [--json]
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="appops-backup", description="Ad-hoc backups of the application tree", add_help=False)
    parser.add_argument("command", nargs="?", default=None, help="create, upload, verify or cleanup")
    parser.add_argument("--working-dir", type=Path, default=None, help="Override working directory")
    parser.add_argument("--backup-root", type=Path, default=None, help="Override backup root directory")
    parser.add_argument("--json", action="store_true", help="Output result as JSON")
    parser.add_argument("-h", "--help", action="store_true", help="Show usage")
    return parser


def _run(manager: BackupManager, command: str) -> tuple[str, dict]:
    if command == "create":
        result = manager.create()
        return (
            f"Backup created: {result.name}",
            {"name": result.name, "path": str(result.directory), "manifest": result.manifest.model_dump(), "skipped": result.skipped},
        )
    if command == "upload":
        record = manager.upload()
        return "Backup uploaded successfully (simulated)", record.model_dump(by_alias=True)
    if command == "verify":
        verified = manager.verify()
        return (
            f"Backup integrity verified: {verified.name}",
            {"name": verified.name, "checksum": verified.checksum, "files": verified.file_count},
        )
    summary = manager.cleanup()
    if summary.removed:
        message = f"Cleaned up {len(summary.removed)} old backups"
    else:
        message = "No old backups to clean up"
    return message, {"removed": summary.removed, "kept": summary.kept, "freed_bytes": summary.freed_bytes}


def cli(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        print(f"Unknown option(s): {' '.join(unknown)}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2
    if args.help or args.command not in COMMANDS:
        print(USAGE)
        return 0

    try:
        working_dir = resolve_working_dir(args.working_dir)
        configure_json_logging(working_dir)
        manager = BackupManager(
            working_dir=working_dir,
            backup_root=args.backup_root,
            logger=BackupLogger(working_dir, command=args.command),
        )
        message, payload = _run(manager, args.command)
    except (BackupError, OSError, ValueError) as exc:
        LOGGER.error("backup %s failed: %s", args.command, exc)
        print(f"Backup operation failed: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print(message)
    return 0


__all__ = ["cli"]
