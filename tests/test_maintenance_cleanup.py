import json
import os
from datetime import datetime, timedelta, timezone

from maintenance.cleanup import clear_directory, prune_old_files, run_daily_cleanup
from maintenance.run import cli


def _age(path, *, days, now):
    stamp = (now - timedelta(days=days)).timestamp()
    os.utime(path, (stamp, stamp))


def test_prune_old_files_respects_cutoff(tmp_path):
    now = datetime.now(timezone.utc)
    logs = tmp_path / "logs"
    logs.mkdir()
    stale = logs / "old.log"
    fresh = logs / "new.log"
    stale.write_text("old", encoding="utf-8")
    fresh.write_text("new", encoding="utf-8")
    (logs / "archive").mkdir()
    _age(stale, days=8, now=now)
    _age(fresh, days=6, now=now)

    removed = prune_old_files(logs, max_age_days=7, now=now)

    assert removed == ["old.log"]
    assert fresh.exists()
    assert (logs / "archive").is_dir()


def test_missing_directories_are_skipped(tmp_path):
    assert prune_old_files(tmp_path / "nope", max_age_days=7) == []
    assert clear_directory(tmp_path / "nope") == []


def test_run_daily_cleanup_writes_report(tmp_path):
    now = datetime.now(timezone.utc)
    for name in ("logs", "temp", "reports"):
        (tmp_path / name).mkdir()
    old_log = tmp_path / "logs" / "server.log"
    old_log.write_text("x", encoding="utf-8")
    _age(old_log, days=10, now=now)
    (tmp_path / "temp" / "upload.part").write_bytes(b"\x00")
    (tmp_path / "temp" / "session.tmp").write_bytes(b"\x00")
    recent_report = tmp_path / "reports" / "weekly.json"
    recent_report.write_text("{}", encoding="utf-8")
    _age(recent_report, days=10, now=now)
    old_report = tmp_path / "reports" / "q1.json"
    old_report.write_text("{}", encoding="utf-8")
    _age(old_report, days=31, now=now)

    report = run_daily_cleanup(tmp_path, {}, now=now)

    assert report.status == "success"
    assert report.removed == {
        "logs": ["server.log"],
        "temp": ["session.tmp", "upload.part"],
        "reports": ["q1.json"],
    }
    assert recent_report.exists()
    assert report.path == tmp_path / "reports" / f"cleanup-{now.date().isoformat()}.json"
    saved = json.loads(report.path.read_text(encoding="utf-8"))
    assert saved["message"] == "Daily cleanup completed successfully"
    assert saved["removed"]["temp"] == ["session.tmp", "upload.part"]


def test_cleanup_settings_override_directories(tmp_path):
    now = datetime.now(timezone.utc)
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    (scratch / "a.tmp").write_text("a", encoding="utf-8")

    report = run_daily_cleanup(tmp_path, {"maintenance": {"temp_dir": "scratch"}}, now=now)

    assert report.removed["temp"] == ["a.tmp"]
    assert report.removed["logs"] == []


def test_cli_outputs_json(tmp_path, capsys):
    (tmp_path / "temp").mkdir()
    (tmp_path / "temp" / "x.tmp").write_text("x", encoding="utf-8")

    assert cli(["--working-dir", str(tmp_path), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "success"
    assert payload["removed"]["temp"] == ["x.tmp"]
