"""Pytest configuration and shared fixtures."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from videostore import config
from videostore.core.payload import Materializer
from videostore.transport.base import DeviceConnection, DeviceConnector


@pytest.fixture
def credential_record():
    """Provide a stored credential record in the panel's cookie shape."""
    return {
        "apiKey": {"id": "key-id-123", "key": "key-secret-456"},
        "machineId": "machine-789",
        "hostname": "machine-main.abc123.viam.cloud",
    }


@pytest.fixture
def credentials_file(tmp_path, credential_record):
    """Write a credentials file holding one record under ``machine-1``."""
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({"machine-1": credential_record}), encoding="utf-8")
    return path


@pytest.fixture
def settings(credentials_file, tmp_path, monkeypatch):
    """Install process settings pointing at the test credentials file."""
    monkeypatch.setattr(config, "_settings", None)
    installed = config.Settings(
        credentials_file=credentials_file,
        download_dir=tmp_path / "downloads",
        storage_secret="test-secret",
    )
    config.configure(installed)
    return installed


@pytest.fixture
def connection():
    """A connected machine exposing ``cam1`` and ``cam2``."""
    conn = AsyncMock(spec=DeviceConnection)
    conn.resource_names.return_value = ["cam1", "cam2"]
    conn.do_command.return_value = {}
    return conn


@pytest.fixture
def connector(connection):
    """A connector that hands out the ``connection`` fixture."""
    conn = AsyncMock(spec=DeviceConnector)
    conn.connect.return_value = connection
    conn.backend_name = "fake"
    return conn


@pytest.fixture
def materializer():
    return MagicMock(spec=Materializer)
