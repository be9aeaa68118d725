"""Exception hierarchy for the video-store session workflow."""

from __future__ import annotations


class VideoStoreError(Exception):
    """Base exception for all videostore errors."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class AuthError(VideoStoreError):
    """Credentials are missing or invalid; raised before any network call."""


class ConnectionError(VideoStoreError):
    """Failed to establish a connection to the remote machine."""


class SelectionError(VideoStoreError):
    """Selection attempted without a connection or for an unknown resource."""


class ValidationError(VideoStoreError):
    """An action was triggered with missing or unparseable inputs."""


class DecodeError(VideoStoreError):
    """A command reply could not be decoded."""


class TransportError(VideoStoreError):
    """A command round-trip failed."""


# HTTP status for each error kind, used by the API layer
_HTTP_STATUS: dict[type[VideoStoreError], int] = {
    AuthError: 401,
    ConnectionError: 502,
    SelectionError: 404,
    ValidationError: 400,
    DecodeError: 502,
    TransportError: 502,
}


def http_status_for(exc: VideoStoreError) -> int:
    """Map an error to the HTTP status code the API should respond with."""
    for exc_class in type(exc).__mro__:
        status = _HTTP_STATUS.get(exc_class)
        if status is not None:
            return status
    return 500
