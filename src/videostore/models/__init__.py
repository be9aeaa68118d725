"""Pydantic data models for videostore."""

from videostore.models.connection import DEFAULT_SIGNALING_ADDRESS, ConnectionParams
from videostore.models.session import (
    ActionKind,
    ActionState,
    ActionStatus,
    ClipDownload,
    ResourceRef,
    SessionStatus,
    VideoResult,
)

__all__ = [
    "ActionKind",
    "ActionState",
    "ActionStatus",
    "ClipDownload",
    "ConnectionParams",
    "DEFAULT_SIGNALING_ADDRESS",
    "ResourceRef",
    "SessionStatus",
    "VideoResult",
]
