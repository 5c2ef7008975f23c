import json
import sys

import pytest

from objectfs import check
from objectfs.config.client_config import ClientConfig
from objectfs.store.object_client import ConnectionResult
from objectfs.store.registry import UnknownProviderError
from objectfs.store.s3_client import SDK_MISSING


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(check, "configure_logging", lambda *args, **kwargs: None)
    for name in ("OBJECTFS_FILESYSTEM_CLASS", "OBJECTFS_PROVIDER", "OBJECTFS_MAX_UPLOAD_BYTES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings_path(tmp_path):
    path = tmp_path / "objectfs.json"
    path.write_text(json.dumps({"filesystem": "s3_file_system", "s3_bucket": "files", "s3_key": "k", "s3_secret": "s"}))
    return path


def use_client(monkeypatch, client):
    created = {}

    def fake_create_client(config, **options):
        created["config"] = config
        created["options"] = options
        return client

    monkeypatch.setattr(check, "create_client", fake_create_client)
    return created


def test_ready_exit_status(monkeypatch, capsys, settings_path, make_client):
    client = make_client()
    created = use_client(monkeypatch, client)
    status = check.main(["--settings", str(settings_path), "--filesystem-class", "s3_file_system"])
    out = capsys.readouterr().out.splitlines()
    assert status == check.EXIT_READY
    assert out[0].startswith("[SUCCESS] Could establish connection")
    assert out[-1] == "Ready: yes"
    assert created["options"]["settings"].bucket_name == "files"
    assert client.permission_calls == [True, False]


def test_no_test_delete_flag(monkeypatch, capsys, settings_path, make_client):
    client = make_client()
    use_client(monkeypatch, client)
    check.main(["--settings", str(settings_path), "--filesystem-class", "s3_file_system", "--no-test-delete"])
    assert client.permission_calls == [False, False]


def test_not_ready_exit_status(monkeypatch, capsys, settings_path, make_client):
    use_client(monkeypatch, make_client(connection=ConnectionResult(success=False, details="timeout")))
    status = check.main(["--settings", str(settings_path), "--filesystem-class", "s3_file_system"])
    out = capsys.readouterr().out.splitlines()
    assert status == check.EXIT_NOT_READY
    assert out == [
        "[ERROR] Could not establish connection to the external object storage. timeout",
        "Ready: no",
    ]


def test_environment_config(monkeypatch, capsys, make_client):
    monkeypatch.setenv("OBJECTFS_FILESYSTEM_CLASS", "s3_file_system")
    monkeypatch.setenv("OBJECTFS_PROVIDER", "s3_file_system")
    created = use_client(monkeypatch, make_client())
    assert check.main([]) == check.EXIT_READY
    assert created["config"] == ClientConfig("s3_file_system", "s3_file_system")
    assert created["options"] == {}


def test_filesystem_class_flag_overrides_environment(monkeypatch, capsys, make_client):
    monkeypatch.setenv("OBJECTFS_FILESYSTEM_CLASS", "s3_file_system")
    monkeypatch.setenv("OBJECTFS_PROVIDER", "s3_file_system")
    created = use_client(monkeypatch, make_client())
    assert check.main(["--filesystem-class", ""]) == check.EXIT_NOT_READY
    assert created["config"].filesystem_class_name == ""


def test_unknown_provider_is_config_error(monkeypatch, capsys):
    def unknown(config, **options):
        raise UnknownProviderError(config.configured_provider)

    monkeypatch.setattr(check, "create_client", unknown)
    assert check.main([]) == check.EXIT_CONFIG_ERROR
    assert capsys.readouterr().out == ""


def test_malformed_environment_is_config_error(monkeypatch):
    monkeypatch.setenv("OBJECTFS_MAX_UPLOAD_BYTES", "lots")
    assert check.main([]) == check.EXIT_CONFIG_ERROR


def test_missing_settings_file_is_config_error(tmp_path):
    assert check.main(["--settings", str(tmp_path / "missing.json")]) == check.EXIT_CONFIG_ERROR


def test_missing_sdk_is_not_ready(monkeypatch, capsys, settings_path):
    monkeypatch.setitem(sys.modules, "boto3", None)
    status = check.main(["--settings", str(settings_path), "--filesystem-class", "s3_file_system"])
    out = capsys.readouterr().out.splitlines()
    assert status == check.EXIT_NOT_READY
    assert out == [
        f"[ERROR] Could not establish connection to the external object storage. {SDK_MISSING}",
        "Ready: no",
    ]
