"""Session, resource and per-action state models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class SessionStatus(str, Enum):
    """Lifecycle of a resource session."""
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    READY = "ready"
    EMPTY = "empty"
    FAILED = "failed"


class ActionKind(str, Enum):
    """User-triggered actions, each with independent state."""
    FETCH = "fetch"
    GET_STORAGE_STATE = "get-storage-state"


class ActionStatus(str, Enum):
    """State of one action kind."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ResourceRef(BaseModel):
    """A command-capable resource exposed by the machine."""
    model_config = {"frozen": True}

    id: str
    name: str

    @model_validator(mode="before")
    @classmethod
    def _self_naming(cls, data: Any) -> Any:
        if isinstance(data, dict) and "id" not in data and "name" in data:
            data = {**data, "id": data["name"]}
        return data

    @classmethod
    def from_name(cls, name: str) -> ResourceRef:
        return cls(id=name, name=name)


class ActionState(BaseModel):
    """Presentable state for a single action kind."""

    status: ActionStatus = ActionStatus.IDLE
    result: Any = None
    error: str | None = None

    @property
    def in_flight(self) -> bool:
        return self.status is ActionStatus.IN_FLIGHT

    @classmethod
    def idle(cls) -> ActionState:
        return cls()

    @classmethod
    def started(cls) -> ActionState:
        return cls(status=ActionStatus.IN_FLIGHT)

    @classmethod
    def succeeded(cls, result: Any = None) -> ActionState:
        return cls(status=ActionStatus.SUCCEEDED, result=result)

    @classmethod
    def failed(cls, message: str) -> ActionState:
        return cls(status=ActionStatus.FAILED, error=message)


class VideoResult(BaseModel):
    """Reply of a ``fetch`` command."""

    resource_name: str
    from_wire: str
    to_wire: str
    video_base64: str = Field(repr=False)


class ClipDownload(BaseModel):
    """A clip that was decoded and handed to the materializer."""

    resource_name: str
    filename: str
    size_bytes: int
