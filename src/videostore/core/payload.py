"""Decoding command replies and materializing them for the operator."""

from __future__ import annotations

import abc
import base64
import binascii
import json
from pathlib import Path
from typing import Any

from videostore.exceptions import DecodeError
from videostore.utils.logging import get_logger

logger = get_logger(__name__)

VIDEO_MIME_TYPE = "video/mp4"
VIDEO_EXTENSION = "mp4"

_STRIP_WHITESPACE = str.maketrans("", "", " \t\n\f\r")


class Materializer(abc.ABC):
    """Platform capability that turns bytes into a saved file."""

    @abc.abstractmethod
    def materialize(self, data: bytes, filename: str, mime_type: str) -> None:
        """Save *data* under *filename*."""


class DirectoryMaterializer(Materializer):
    """Writes artifacts into a directory on local disk."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, filename: str) -> Path:
        # Only the final component is used so a resource name can't escape
        return self._directory / Path(filename).name

    def materialize(self, data: bytes, filename: str, mime_type: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self.path_for(filename)
        partial = target.with_name(target.name + ".part")
        try:
            partial.write_bytes(data)
        except Exception:
            partial.unlink(missing_ok=True)
            raise
        partial.replace(target)
        logger.info("artifact_written", path=str(target), size=len(data), mime_type=mime_type)


def video_filename(resource_name: str, from_wire: str, to_wire: str) -> str:
    """Download name for a clip: ``{resource}_{from}_{to}.mp4``."""
    base = resource_name or "video"
    return f"{base}_{from_wire}_{to_wire}.{VIDEO_EXTENSION}"


def decode_video(video_base64: str) -> bytes:
    """Decode a base64 video payload.

    ASCII whitespace is ignored, so line-wrapped payloads decode, and
    missing ``=`` padding is restored. Any other character outside the
    base64 alphabet is rejected.

    Raises:
        DecodeError: If the payload is not valid base64.
    """
    if not isinstance(video_base64, str):
        raise DecodeError("no video data in response")
    compact = video_base64.translate(_STRIP_WHITESPACE)
    if len(compact) % 4 in (2, 3):
        compact += "=" * (4 - len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"invalid base64 video data: {exc}") from exc


def materialize_video(
    video_base64: str,
    filename: str,
    materializer: Materializer,
) -> int:
    """Decode *video_base64* and hand it to *materializer*.

    Returns:
        Number of decoded bytes.

    Raises:
        DecodeError: If the payload is not valid base64.
    """
    data = decode_video(video_base64)
    size = len(data)
    try:
        materializer.materialize(data, filename, VIDEO_MIME_TYPE)
    finally:
        # Drop our reference whether or not the save succeeded
        del data
    logger.info("video_materialized", filename=filename, size=size)
    return size


def format_storage_state(state: Any) -> str:
    """Render a storage-state reply as indented JSON text."""
    return json.dumps(state, indent=2, default=str)
