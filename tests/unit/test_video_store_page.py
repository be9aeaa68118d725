"""Unit tests for the video store panel's session lifetime."""

from __future__ import annotations

import asyncio
from datetime import timezone
from unittest.mock import MagicMock

from nicegui import Client
from pydantic import SecretStr

from videostore.core.controller import SessionController
from videostore.core.session import ResourceSession
from videostore.credentials import StaticCredentialProvider
from videostore.models.connection import ConnectionParams
from videostore.ui.pages.video_store import release_on_delete

PROVIDER = StaticCredentialProvider(
    ConnectionParams(host="machine.local", api_key_id="id", api_key=SecretStr("secret"))
)


def _controller(connector, materializer) -> SessionController:
    return SessionController(
        ResourceSession(connector), PROVIDER, materializer, tz=timezone.utc
    )


class TestReleaseOnDelete:
    def test_registers_close_on_delete_only(self, connector, materializer):
        client = MagicMock(spec=Client)
        controller = _controller(connector, materializer)

        release_on_delete(client, controller)

        client.on_delete.assert_called_once_with(controller.close)
        client.on_disconnect.assert_not_called()

    def test_session_survives_until_delete(self, connector, connection, materializer):
        client = MagicMock(spec=Client)
        connection.do_command.return_value = {"usedBytes": 1}

        async def scenario():
            controller = _controller(connector, materializer)
            release_on_delete(client, controller)
            await controller.start("machine-1")

            # a websocket reconnect leaves the session usable
            assert controller.select("cam1") is not None
            state = await controller.get_storage_state()
            assert state.error is None
            connection.close.assert_not_awaited()

            (handler,), _ = client.on_delete.call_args
            await handler()

        asyncio.run(scenario())

        connection.close.assert_awaited_once()
