"""Abstract interface to the remote machine's session and command channel."""

from __future__ import annotations

import abc
from typing import Any, Mapping

from videostore.models.connection import ConnectionParams


class DeviceConnection(abc.ABC):
    """An authenticated connection to one machine.

    The handle is shared read-only by every dispatcher derived from it.
    """

    @abc.abstractmethod
    async def resource_names(self) -> list[str]:
        """Return the names of all addressable resources, in machine order."""

    @abc.abstractmethod
    async def do_command(
        self,
        resource_name: str,
        command: Mapping[str, Any],
    ) -> Mapping[str, Any]:
        """Send a structured command to *resource_name* and return its reply."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the connection."""


class DeviceConnector(abc.ABC):
    """Factory for :class:`DeviceConnection` objects."""

    @abc.abstractmethod
    async def connect(self, params: ConnectionParams) -> DeviceConnection:
        """Open an authenticated connection described by *params*."""

    @property
    @abc.abstractmethod
    def backend_name(self) -> str:
        """Human-readable name of this connector."""
