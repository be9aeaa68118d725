"""Typed video-store commands over the generic command channel."""

from __future__ import annotations

from typing import Any, Mapping

from videostore.exceptions import DecodeError, TransportError, VideoStoreError
from videostore.models.session import VideoResult
from videostore.transport.base import DeviceConnection
from videostore.utils.logging import get_logger

logger = get_logger(__name__)

FETCH_COMMAND = "fetch"
STORAGE_STATE_COMMAND = "get-storage-state"
VIDEO_FIELD = "video"


def _as_mapping(reply: Any) -> Mapping[str, Any] | None:
    """Return *reply* if it is structured data, else None."""
    if isinstance(reply, Mapping):
        return reply
    return None


class CommandDispatcher:
    """Sends commands to exactly one selected resource.

    Every call is a single attempt: transport failures surface as
    :class:`TransportError`, malformed replies as :class:`DecodeError`.

    Usage:
        dispatcher = session.select("video-store-1")
        state = await dispatcher.get_storage_state()
        clip = await dispatcher.fetch(from_wire, to_wire)
    """

    def __init__(self, connection: DeviceConnection, resource_name: str) -> None:
        self._connection = connection
        self._resource_name = resource_name

    @property
    def resource_name(self) -> str:
        return self._resource_name

    def __repr__(self) -> str:
        return f"CommandDispatcher(resource_name={self._resource_name!r})"

    async def _send(self, command: Mapping[str, Any]) -> Mapping[str, Any]:
        name = command.get("command")
        logger.debug("command_sending", resource=self._resource_name, command=name)
        try:
            reply = await self._connection.do_command(self._resource_name, command)
        except VideoStoreError:
            raise
        except Exception as exc:
            logger.warning(
                "command_failed",
                resource=self._resource_name,
                command=name,
                error=str(exc),
            )
            raise TransportError(
                f"{name} failed: {exc}" if str(exc) else f"{name} failed",
                detail=repr(exc),
            ) from exc

        payload = _as_mapping(reply)
        if payload is None:
            raise DecodeError(
                f"unexpected {name} reply: expected structured data, "
                f"got {type(reply).__name__}"
            )
        return payload

    async def fetch(self, from_wire: str, to_wire: str) -> VideoResult:
        """Request the clip covering ``[from_wire, to_wire]``.

        Raises:
            TransportError: If the command round-trip fails.
            DecodeError: If the reply has no base64 ``video`` string.
        """
        payload = await self._send(
            {"command": FETCH_COMMAND, "from": from_wire, "to": to_wire}
        )
        video = payload.get(VIDEO_FIELD)
        if not video or not isinstance(video, str):
            raise DecodeError("no video data in response")

        logger.info(
            "video_fetched",
            resource=self._resource_name,
            start=from_wire,
            end=to_wire,
            encoded_bytes=len(video),
        )
        return VideoResult(
            resource_name=self._resource_name,
            from_wire=from_wire,
            to_wire=to_wire,
            video_base64=video,
        )

    async def get_storage_state(self) -> dict[str, Any]:
        """Return the resource's storage/backlog state verbatim."""
        payload = await self._send({"command": STORAGE_STATE_COMMAND})
        logger.info("storage_state_received", resource=self._resource_name)
        return dict(payload)
