"""Orchestrates operator actions against the session with single-flight state.

Each action kind (``fetch`` and ``get-storage-state``) has its own
:class:`ActionState`. A trigger while that kind is in flight is ignored, so
there is at most one outstanding request per kind. Inputs are validated
before anything is sent, and every error is turned into a message on the
action's state instead of propagating.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Any, Awaitable, Callable

from videostore.core.dispatcher import CommandDispatcher
from videostore.core.payload import (
    Materializer,
    format_storage_state,
    materialize_video,
    video_filename,
)
from videostore.core.session import ResourceSession
from videostore.core.time_range import TimeWindow, default_window
from videostore.credentials import CredentialProvider
from videostore.exceptions import SelectionError, ValidationError, VideoStoreError
from videostore.models.session import (
    ActionKind,
    ActionState,
    ClipDownload,
    ResourceRef,
    SessionStatus,
    VideoResult,
)
from videostore.utils.logging import get_logger

logger = get_logger(__name__)

NO_SELECTION_MESSAGE = "select a video-store resource first"
INVALID_RANGE_MESSAGE = "select a valid time range"

_FALLBACK_MESSAGES: dict[ActionKind, str] = {
    ActionKind.FETCH: "failed to fetch video",
    ActionKind.GET_STORAGE_STATE: "failed to get storage state",
}


class SessionController:
    """Presentable state for one operator view of one machine.

    Usage:
        controller = SessionController(session, provider, materializer)
        await controller.start("machine-key")
        controller.select("video-store-1")
        await controller.get_storage_state()
        await controller.fetch_video()
    """

    def __init__(
        self,
        session: ResourceSession,
        provider: CredentialProvider,
        materializer: Materializer,
        window: TimeWindow | None = None,
        tz: tzinfo | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._session = session
        self._provider = provider
        self._materializer = materializer
        self._tz = tz
        self.window = window if window is not None else default_window(tz=tz)
        self._on_change = on_change
        self._states: dict[ActionKind, ActionState] = {
            kind: ActionState.idle() for kind in ActionKind
        }
        self._connection_error: str | None = None
        self._selection_error: str | None = None

    # --- Session lifecycle ---

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def connection_error(self) -> str | None:
        return self._connection_error

    @property
    def selection_error(self) -> str | None:
        return self._selection_error

    @property
    def resources(self) -> tuple[ResourceRef, ...]:
        return self._session.resources

    @property
    def selected_name(self) -> str:
        return self._session.selected_name

    async def start(self, identity: str | None) -> SessionStatus:
        """Initialize the session once; failures become ``connection_error``."""
        try:
            await self._session.initialize(identity, self._provider)
        except VideoStoreError as exc:
            self._connection_error = str(exc)
        self._notify()
        return self.status

    async def close(self) -> None:
        await self._session.close()

    def select(self, resource_name: str | None) -> CommandDispatcher | None:
        """Replace the selected resource. An empty name is ignored."""
        if not resource_name:
            return None
        try:
            dispatcher = self._session.select(resource_name)
        except SelectionError as exc:
            self._selection_error = str(exc)
            self._notify()
            return None
        self._selection_error = None
        self._notify()
        return dispatcher

    # --- Time window ---

    def set_window(self, from_local: str | None = None, to_local: str | None = None) -> None:
        """Update one or both local bounds."""
        self.window = TimeWindow(
            from_local=self.window.from_local if from_local is None else from_local,
            to_local=self.window.to_local if to_local is None else to_local,
        )
        self._notify()

    @property
    def wire_bounds(self) -> tuple[str, str]:
        return self.window.wire_bounds(self._tz)

    # --- Actions ---

    def state(self, kind: ActionKind) -> ActionState:
        return self._states[kind]

    def is_in_flight(self, kind: ActionKind) -> bool:
        return self._states[kind].in_flight

    @property
    def storage_state_text(self) -> str:
        """Last storage state as indented JSON, or ``""`` if none."""
        state = self._states[ActionKind.GET_STORAGE_STATE]
        if state.result is None:
            return ""
        return format_storage_state(state.result)

    async def get_storage_state(self) -> ActionState:
        """Query the selected resource's storage state."""
        kind = ActionKind.GET_STORAGE_STATE
        if self.is_in_flight(kind):
            logger.debug("action_ignored_in_flight", action=kind.value)
            return self._states[kind]

        dispatcher = self._session.selected
        if dispatcher is None:
            return self._reject(kind, ValidationError(NO_SELECTION_MESSAGE))

        return await self._dispatch(
            kind,
            dispatcher,
            dispatcher.get_storage_state,
            lambda reply: reply,
        )

    async def fetch_video(self) -> ActionState:
        """Fetch the clip for the current window and materialize it."""
        kind = ActionKind.FETCH
        if self.is_in_flight(kind):
            logger.debug("action_ignored_in_flight", action=kind.value)
            return self._states[kind]

        dispatcher = self._session.selected
        if dispatcher is None:
            return self._reject(kind, ValidationError(NO_SELECTION_MESSAGE))

        from_wire, to_wire = self.wire_bounds
        if not from_wire or not to_wire:
            return self._reject(kind, ValidationError(INVALID_RANGE_MESSAGE))

        def complete(result: VideoResult) -> ClipDownload:
            filename = video_filename(result.resource_name, result.from_wire, result.to_wire)
            size = materialize_video(result.video_base64, filename, self._materializer)
            return ClipDownload(
                resource_name=result.resource_name,
                filename=filename,
                size_bytes=size,
            )

        return await self._dispatch(
            kind,
            dispatcher,
            lambda: dispatcher.fetch(from_wire, to_wire),
            complete,
        )

    # --- Internals ---

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _set(self, kind: ActionKind, state: ActionState) -> ActionState:
        self._states[kind] = state
        self._notify()
        return state

    def _reject(self, kind: ActionKind, exc: ValidationError) -> ActionState:
        logger.info("action_rejected", action=kind.value, reason=str(exc))
        return self._set(kind, ActionState.failed(str(exc)))

    async def _dispatch(
        self,
        kind: ActionKind,
        dispatcher: CommandDispatcher,
        request: Callable[[], Awaitable[Any]],
        complete: Callable[[Any], Any],
    ) -> ActionState:
        self._set(kind, ActionState.started())
        outcome: ActionState
        try:
            reply = await request()
            if self._session.selected is dispatcher:
                outcome = ActionState.succeeded(complete(reply))
            else:
                outcome = ActionState.idle()
        except VideoStoreError as exc:
            logger.warning(
                "action_failed",
                action=kind.value,
                resource=dispatcher.resource_name,
                error=str(exc),
                detail=exc.detail,
            )
            outcome = ActionState.failed(str(exc) or _FALLBACK_MESSAGES[kind])
        except Exception as exc:
            logger.error(
                "action_error",
                action=kind.value,
                resource=dispatcher.resource_name,
                exc_info=True,
            )
            outcome = ActionState.failed(str(exc) or _FALLBACK_MESSAGES[kind])

        if self._session.selected is not dispatcher:
            logger.info(
                "stale_result_discarded",
                action=kind.value,
                resource=dispatcher.resource_name,
            )
            outcome = ActionState.idle()
        return self._set(kind, outcome)
