import os
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import mock

from core import paths as core_paths


class CorePathsTests(unittest.TestCase):
    def test_override_wins_over_environment(self) -> None:
        with TemporaryDirectory() as first, TemporaryDirectory() as second:
            with mock.patch.dict(os.environ, {"APPOPS_HOME": first}):
                resolved = core_paths.resolve_working_dir(Path(second))
        self.assertEqual(resolved, Path(second).resolve())

    def test_environment_used_without_override(self) -> None:
        with TemporaryDirectory() as home:
            with mock.patch.dict(os.environ, {"APPOPS_HOME": home}):
                resolved = core_paths.resolve_working_dir()
        self.assertEqual(resolved, Path(home).resolve())

    def test_falls_back_to_current_directory(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            resolved = core_paths.resolve_working_dir()
        self.assertEqual(resolved, Path.cwd().resolve())

    def test_resolve_path_keeps_absolute_values(self) -> None:
        base = Path("/srv/app")
        absolute = Path("/var/backups").resolve()
        self.assertEqual(core_paths.resolve_path("backup", base), base / "backup")
        self.assertEqual(core_paths.resolve_path(str(absolute), base), absolute)

    def test_derived_directories(self) -> None:
        base = Path("/srv/app")
        self.assertEqual(core_paths.get_backup_root(base), base / "backup")
        self.assertEqual(core_paths.get_logs_dir(base), base / "logs")
        self.assertEqual(core_paths.get_temp_dir(base), base / "temp")
        self.assertEqual(core_paths.get_reports_dir(base), base / "reports")


if __name__ == "__main__":
    unittest.main()
