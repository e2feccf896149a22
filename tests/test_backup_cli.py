import json

import pytest

from backup.cli import cli


def _init_app(working_dir):
    (working_dir / "src").mkdir(parents=True)
    (working_dir / "src" / "index.js").write_text("module.exports = 1;\n", encoding="utf-8")
    (working_dir / "package.json").write_text('{"name": "app"}', encoding="utf-8")
    return working_dir


@pytest.mark.parametrize("argv", [[], ["bogus"], ["--help"]])
def test_usage_exits_zero(argv, capsys):
    assert cli(argv) == 0
    assert "Available backup commands" in capsys.readouterr().out


def test_create_upload_verify_cleanup(tmp_path, capsys):
    working_dir = _init_app(tmp_path / "app")
    base = ["--working-dir", str(working_dir)]

    assert cli(["create", *base]) == 0
    assert "Backup created: backup-" in capsys.readouterr().out

    assert cli(["upload", *base, "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "uploaded"
    assert payload["backupPath"].startswith(str(working_dir / "backup"))

    assert cli(["verify", *base]) == 0
    assert "Backup integrity verified" in capsys.readouterr().out

    assert cli(["cleanup", *base]) == 0
    assert "No old backups to clean up" in capsys.readouterr().out

    assert (working_dir / "logs" / "appops.log.jsonl").exists()


@pytest.mark.parametrize("command", ["upload", "verify"])
def test_empty_catalog_fails(tmp_path, capsys, command):
    working_dir = tmp_path / "app"
    working_dir.mkdir()

    assert cli([command, "--working-dir", str(working_dir)]) == 1
    err = capsys.readouterr().err
    assert "Backup operation failed" in err
    assert "no backup found" in err


def test_verify_failure_reports_mismatch(tmp_path, capsys):
    working_dir = _init_app(tmp_path / "app")
    backup_root = tmp_path / "elsewhere"
    args = ["--working-dir", str(working_dir), "--backup-root", str(backup_root)]
    assert cli(["create", *args]) == 0
    capsys.readouterr()

    (snapshot,) = [child for child in backup_root.iterdir() if child.is_dir()]
    (snapshot / "package.json").write_text('{"name": "evil"}', encoding="utf-8")

    assert cli(["verify", *args]) == 1
    assert "integrity check failed" in capsys.readouterr().err


def test_create_into_file_backup_root_fails(tmp_path, capsys):
    working_dir = _init_app(tmp_path / "app")
    blocked = tmp_path / "blocked"
    blocked.write_text("", encoding="utf-8")

    assert cli(["create", "--working-dir", str(working_dir), "--backup-root", str(blocked)]) == 1
    assert "Backup operation failed" in capsys.readouterr().err
    assert blocked.is_file()


def test_unknown_option_is_rejected(tmp_path, capsys):
    working_dir = _init_app(tmp_path / "app")

    assert cli(["create", "--working-dir", str(working_dir), "--bakup-root", str(tmp_path / "x")]) == 2
    captured = capsys.readouterr()
    assert "Unknown option(s): --bakup-root" in captured.err
    assert "Available backup commands" in captured.err
    assert not (working_dir / "backup").exists()
    assert not (tmp_path / "x").exists()


def test_journal_entries_carry_command(tmp_path, capsys):
    working_dir = _init_app(tmp_path / "app")

    assert cli(["create", "--working-dir", str(working_dir)]) == 0
    capsys.readouterr()

    entries = [json.loads(line) for line in (working_dir / "logs" / "backup.jsonl").read_text(encoding="utf-8").splitlines()]
    assert entries
    assert {entry["command"] for entry in entries} == {"create"}
    mirrored = [
        json.loads(line)
        for line in (working_dir / "logs" / "appops.log.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    assert any(line["msg"] == "backup_complete" and line["backup"]["command"] == "create" for line in mirrored)
