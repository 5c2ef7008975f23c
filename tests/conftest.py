"""Shared fixtures: configs and a scriptable in-process client."""

import pytest

from objectfs.config.client_config import ClientConfig, S3Settings
from objectfs.store import registry
from objectfs.store.object_client import (
    ConnectionResult,
    DefaultObjectClient,
    PermissionResult,
    Severity,
)


class StubClient(DefaultObjectClient):
    """Client whose check outcomes are set by the test; counts every call."""

    def __init__(
        self,
        config,
        available=True,
        connection=None,
        permissions=None,
    ):
        super().__init__(config)
        self.available = available
        self.connection = connection or ConnectionResult(success=True, details="ok")
        self.permissions = permissions or PermissionResult(
            success=True, messages={"Permissions check passed.": Severity.SUCCESS}
        )
        self.availability_calls = 0
        self.connection_calls = 0
        self.permission_calls = []

    def check_availability(self):
        self.availability_calls += 1
        return self.available

    def test_connection(self):
        self.connection_calls += 1
        return self.connection

    def test_permissions(self, test_delete):
        self.permission_calls.append(test_delete)
        return self.permissions


@pytest.fixture(autouse=True)
def isolated_registry(monkeypatch):
    monkeypatch.setattr(registry, "_CLIENTS", dict(registry._CLIENTS))


@pytest.fixture
def config():
    return ClientConfig(
        filesystem_class_name="s3_file_system",
        configured_provider="s3_file_system",
    )


@pytest.fixture
def s3_settings():
    return S3Settings(
        bucket_name="objectfs-test",
        access_key="testing",
        secret_key="testing",
        region="us-east-1",
    )


@pytest.fixture
def stub_client(config):
    return StubClient(config)


@pytest.fixture
def make_client(config):
    def _make(client_config=None, **kwargs):
        return StubClient(client_config or config, **kwargs)

    return _make
