"""Unit tests for ResourceSession lifecycle, discovery and selection."""

from __future__ import annotations

import asyncio

import pytest
from pydantic import SecretStr

from videostore.core.session import ResourceSession
from videostore.credentials import StaticCredentialProvider
from videostore.exceptions import AuthError, ConnectionError, SelectionError
from videostore.models.connection import ConnectionParams
from videostore.models.session import ResourceRef, SessionStatus

PARAMS = ConnectionParams(
    host="machine.local",
    api_key_id="key-id",
    api_key=SecretStr("key-secret"),
    machine_id="machine-1",
)


@pytest.fixture
def provider():
    return StaticCredentialProvider(PARAMS)


def _ready(connector, provider) -> ResourceSession:
    session = ResourceSession(connector)
    asyncio.run(session.initialize("machine-1", provider))
    return session


class TestInitialize:
    def test_empty_identity_skips_connection(self, connector, provider):
        session = ResourceSession(connector)

        status = asyncio.run(session.initialize("", provider))

        assert status is SessionStatus.EMPTY
        assert session.resources == ()
        connector.connect.assert_not_awaited()

    def test_none_identity_is_empty(self, connector, provider):
        session = ResourceSession(connector)
        assert asyncio.run(session.initialize(None, provider)) is SessionStatus.EMPTY

    def test_ready_with_discovered_resources(self, connector, connection, provider):
        session = _ready(connector, provider)

        assert session.status is SessionStatus.READY
        assert session.resources == (
            ResourceRef(id="cam1", name="cam1"),
            ResourceRef(id="cam2", name="cam2"),
        )
        connector.connect.assert_awaited_once_with(PARAMS)

    def test_zero_resources_is_still_ready(self, connector, connection, provider):
        connection.resource_names.return_value = []

        session = _ready(connector, provider)

        assert session.status is SessionStatus.READY
        assert session.resources == ()

    def test_one_shot(self, connector, connection, provider):
        session = _ready(connector, provider)

        assert asyncio.run(session.initialize("machine-1", provider)) is SessionStatus.READY
        assert connector.connect.await_count == 1
        assert connection.resource_names.await_count == 1

    def test_missing_credentials_fail_before_network(self, connector):
        session = ResourceSession(connector)
        provider = StaticCredentialProvider(ConnectionParams(host="machine.local"))

        with pytest.raises(AuthError, match="API credentials not found"):
            asyncio.run(session.initialize("machine-1", provider))

        assert session.status is SessionStatus.FAILED
        assert session.error == "API credentials not found"
        connector.connect.assert_not_awaited()

    def test_connector_failure_becomes_connection_error(self, connector, provider):
        connector.connect.side_effect = OSError("dial timeout")
        session = ResourceSession(connector)

        with pytest.raises(ConnectionError, match="dial timeout"):
            asyncio.run(session.initialize("machine-1", provider))

        assert session.status is SessionStatus.FAILED
        assert not session.is_connected


class TestListResources:
    def test_memoized(self, connector, connection, provider):
        session = _ready(connector, provider)

        first = asyncio.run(session.list_resources())
        second = asyncio.run(session.list_resources())

        assert first == second
        assert connection.resource_names.await_count == 1

    def test_requires_connection(self, connector):
        session = ResourceSession(connector)
        with pytest.raises(SelectionError):
            asyncio.run(session.list_resources())

    def test_listing_failure(self, connector, connection):
        connection.resource_names.side_effect = RuntimeError("permission denied")
        session = ResourceSession(connector)
        asyncio.run(session.connect(PARAMS))

        with pytest.raises(ConnectionError, match="permission denied"):
            asyncio.run(session.list_resources())


class TestSelect:
    def test_select_binds_and_replaces(self, connector, provider):
        session = _ready(connector, provider)

        cam2 = session.select("cam2")
        assert cam2.resource_name == "cam2"
        assert session.selected is cam2

        cam1 = session.select("cam1")
        assert cam1.resource_name == "cam1"
        assert session.selected is cam1
        assert session.selected_name == "cam1"

    def test_unknown_resource(self, connector, provider):
        session = _ready(connector, provider)

        with pytest.raises(SelectionError, match="unknown resource: cam9"):
            session.select("cam9")

    def test_select_without_connection(self, connector):
        session = ResourceSession(connector)
        with pytest.raises(SelectionError, match="not connected"):
            session.select("cam1")


class TestClose:
    def test_releases_connection_once(self, connector, connection, provider):
        session = _ready(connector, provider)
        session.select("cam1")

        asyncio.run(session.close())
        asyncio.run(session.close())

        connection.close.assert_awaited_once()
        assert not session.is_connected
        assert session.selected is None

    def test_close_error_is_logged_not_raised(self, connector, connection, provider):
        connection.close.side_effect = RuntimeError("already closed")
        session = _ready(connector, provider)

        asyncio.run(session.close())

        assert not session.is_connected
