"""Session workflow: time codec, dispatch, decode and orchestration."""

from videostore.core.controller import SessionController
from videostore.core.dispatcher import CommandDispatcher
from videostore.core.payload import (
    DirectoryMaterializer,
    Materializer,
    decode_video,
    format_storage_state,
    materialize_video,
    video_filename,
)
from videostore.core.session import ResourceSession
from videostore.core.time_range import TimeWindow, default_window, to_wire_format

__all__ = [
    "CommandDispatcher",
    "DirectoryMaterializer",
    "Materializer",
    "ResourceSession",
    "SessionController",
    "TimeWindow",
    "decode_video",
    "default_window",
    "format_storage_state",
    "materialize_video",
    "to_wire_format",
    "video_filename",
]
