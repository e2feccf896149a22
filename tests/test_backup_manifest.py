import json

import pytest

from backup.errors import ManifestMalformedError, ManifestMissingError
from backup.manifest import Manifest, ManifestStore, UploadLog


def _manifest() -> Manifest:
    return Manifest(
        timestamp="2024-05-01T12:30:00.123Z",
        version="1.0.0",
        files=["src", "package.json"],
        checksum="ab" * 32,
    )


def test_manifest_round_trip(tmp_path):
    store = ManifestStore()
    path = store.write(tmp_path, _manifest())

    assert path == tmp_path / "manifest.json"
    assert not (tmp_path / "manifest.json.tmp").exists()
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert set(raw) == {"timestamp", "version", "files", "checksum"}
    assert store.read(tmp_path) == _manifest()


def test_read_missing_manifest(tmp_path):
    with pytest.raises(ManifestMissingError):
        ManifestStore().read(tmp_path)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"timestamp": "2024-05-01T12:30:00.123Z", "version": "1.0.0", "files": []}),
        json.dumps(["not", "an", "object"]),
        b"\xff\xfe{bad",
        b'{"timestamp": "\xc3", "version": "1.0.0", "files": [], "checksum": "00"}',
    ],
)
def test_read_malformed_manifest(tmp_path, content):
    if isinstance(content, bytes):
        (tmp_path / "manifest.json").write_bytes(content)
    else:
        (tmp_path / "manifest.json").write_text(content, encoding="utf-8")

    with pytest.raises(ManifestMalformedError):
        ManifestStore().read(tmp_path)


def test_upload_log_uses_camel_case_backup_path(tmp_path):
    store = ManifestStore()
    record = UploadLog(
        timestamp="2024-05-01T12:31:00.000Z",
        backup_path=str(tmp_path),
        status="uploaded",
        url="https://example-bucket.s3.amazonaws.com/backups/",
    )
    path = store.write_upload_log(tmp_path, record)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["backupPath"] == str(tmp_path)
    assert "backup_path" not in raw
    assert store.read_upload_log(tmp_path) == record
