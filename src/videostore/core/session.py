"""Authenticated machine session, resource discovery and selection."""

from __future__ import annotations

from videostore.core.dispatcher import CommandDispatcher
from videostore.credentials import CredentialProvider
from videostore.exceptions import AuthError, ConnectionError, SelectionError, VideoStoreError
from videostore.models.connection import ConnectionParams
from videostore.models.session import ResourceRef, SessionStatus
from videostore.transport.base import DeviceConnection, DeviceConnector
from videostore.utils.logging import get_logger

logger = get_logger(__name__)


class ResourceSession:
    """Owns one machine connection and the resources discovered on it.

    Initialization is one-shot: the lifecycle moves from ``UNINITIALIZED``
    through ``CONNECTING`` to ``READY`` (or ``EMPTY`` when there is no acting
    identity, or ``FAILED``) and later calls are no-ops.

    Usage:
        session = ResourceSession(connector)
        await session.initialize("machine-key", provider)
        dispatcher = session.select(session.resources[0].name)
        ...
        await session.close()
    """

    def __init__(self, connector: DeviceConnector | None = None) -> None:
        self._connector = connector
        self._connection: DeviceConnection | None = None
        self._resources: list[ResourceRef] | None = None
        self._selected: CommandDispatcher | None = None
        self._status = SessionStatus.UNINITIALIZED
        self._error: str | None = None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def resources(self) -> tuple[ResourceRef, ...]:
        return tuple(self._resources or ())

    @property
    def selected(self) -> CommandDispatcher | None:
        return self._selected

    @property
    def selected_name(self) -> str:
        return self._selected.resource_name if self._selected is not None else ""

    def _get_connector(self) -> DeviceConnector:
        if self._connector is None:
            from videostore.transport import default_connector

            try:
                self._connector = default_connector()
            except RuntimeError as exc:
                raise ConnectionError(str(exc)) from exc
        return self._connector

    async def connect(self, params: ConnectionParams) -> None:
        """Open the connection once; later calls reuse it.

        Raises:
            AuthError: If the API key pair is empty. No network call is made.
            ConnectionError: If the connection cannot be established.
        """
        if self._connection is not None:
            return
        if not params.has_credentials:
            raise AuthError("API credentials not found")

        connector = self._get_connector()
        try:
            self._connection = await connector.connect(params)
        except VideoStoreError:
            raise
        except Exception as exc:
            logger.error("session_connect_failed", host=params.host, error=str(exc))
            raise ConnectionError(
                f"failed to connect to {params.host or 'machine'}: {exc}",
                detail=repr(exc),
            ) from exc
        logger.info(
            "session_connected",
            host=params.host,
            backend=connector.backend_name,
        )

    async def list_resources(self) -> list[ResourceRef]:
        """Discover resources on the connected machine.

        The first successful listing is memoized; repeated calls return it
        without touching the connection.

        Raises:
            SelectionError: If called before :meth:`connect`.
            ConnectionError: If the machine fails to list its resources.
        """
        if self._resources is not None:
            return list(self._resources)
        if self._connection is None:
            raise SelectionError("not connected to a machine")

        try:
            names = await self._connection.resource_names()
        except Exception as exc:
            raise ConnectionError(f"failed to list resources: {exc}", detail=repr(exc)) from exc

        self._resources = [ResourceRef.from_name(name) for name in names]
        logger.info("resources_listed", count=len(self._resources))
        return list(self._resources)

    def select(self, resource_name: str) -> CommandDispatcher:
        """Bind a dispatcher to *resource_name*, replacing any prior selection.

        Raises:
            SelectionError: If not connected or the resource is unknown.
        """
        if self._connection is None:
            raise SelectionError("not connected to a machine")
        if self._resources is not None and resource_name not in {r.name for r in self._resources}:
            raise SelectionError(f"unknown resource: {resource_name}")

        self._selected = CommandDispatcher(self._connection, resource_name)
        logger.info("resource_selected", resource=resource_name)
        return self._selected

    async def initialize(self, identity: str | None, provider: CredentialProvider) -> SessionStatus:
        """Run the one-shot connect-and-discover lifecycle.

        An empty *identity* is a valid terminal state (``EMPTY``): no
        connection is attempted.

        Raises:
            AuthError: If *provider* has no usable credentials.
            ConnectionError: If connecting or listing fails.
        """
        if self._status is not SessionStatus.UNINITIALIZED:
            return self._status

        if not identity:
            self._resources = []
            self._status = SessionStatus.EMPTY
            logger.info("session_empty")
            return self._status

        self._status = SessionStatus.CONNECTING
        try:
            params = provider.get(identity)
            await self.connect(params)
            await self.list_resources()
        except VideoStoreError as exc:
            self._status = SessionStatus.FAILED
            self._error = str(exc)
            logger.error("session_init_failed", identity=identity, error=str(exc))
            raise

        self._status = SessionStatus.READY
        return self._status

    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        connection, self._connection = self._connection, None
        self._selected = None
        if connection is None:
            return
        try:
            await connection.close()
        except Exception:
            logger.warning("session_close_error", exc_info=True)
        logger.info("session_closed")
