"""Video store panel - pick a resource, query storage state, fetch clips."""

from __future__ import annotations

from nicegui import Client, ui

from videostore.config import get_settings
from videostore.core.controller import SessionController
from videostore.core.session import ResourceSession
from videostore.models.session import ActionKind, SessionStatus
from videostore.transport.base import DeviceConnector
from videostore.ui.components.common import (
    card_header,
    card_style,
    error_label,
    set_error,
    sync_trigger,
)
from videostore.ui.layout import page_layout
from videostore.ui.services.download import BrowserMaterializer
from videostore.ui.theme import COLORS
from videostore.utils.logging import get_logger

logger = get_logger(__name__)


def video_store_page(
    machine_key: str,
    client: Client,
    connector: DeviceConnector | None = None,
) -> None:
    """Render the video store panel at /machine/{machine_key}."""

    def content():
        _video_store_content(machine_key, client, connector)

    page_layout("Video Store", content, machine_key=machine_key)


def release_on_delete(client: Client, controller: SessionController) -> None:
    """Close the session once *client* is deleted.

    ``on_disconnect`` also fires when the websocket reconnects, while the
    page and its controller stay alive.
    """
    client.on_delete(controller.close)


def _video_store_content(
    machine_key: str,
    client: Client,
    connector: DeviceConnector | None,
) -> None:
    """Build the panel content inside page_layout."""
    settings = get_settings()
    controller = SessionController(
        ResourceSession(connector),
        settings.credential_provider(),
        BrowserMaterializer(),
        on_change=lambda: sync(),
    )
    release_on_delete(client, controller)

    status_label = ui.label("Loading machine resources...").style(
        f"color: {COLORS.text_secondary}"
    )

    resource_select = ui.select(
        {},
        label="Select the video-store resource",
        on_change=lambda e: controller.select(e.value),
    ).classes("w-96")
    resource_select.set_visibility(False)
    select_error = error_label()

    actions = ui.column().classes("w-full gap-4")
    actions.set_visibility(False)
    with actions:
        # Storage state
        with ui.card().classes("w-full p-4").style(card_style()):
            card_header("Get storage state", "storage")
            state_button = ui.button(
                "Get storage state", icon="query_stats",
                on_click=controller.get_storage_state,
            ).style(f"background: {COLORS.blue}")
            state_error = error_label()
            state_output = ui.label("").classes("state-dump mt-2").style(
                f"color: {COLORS.text_primary}"
            )

        # Fetch video
        with ui.card().classes("w-full p-4").style(card_style()):
            card_header("Fetch video", "movie")
            with ui.row().classes("items-end gap-4 flex-wrap"):
                ui.input(
                    "From",
                    value=controller.window.from_local,
                    on_change=lambda e: controller.set_window(from_local=e.value or ""),
                ).props('type=datetime-local step=1').classes("w-64")
                ui.input(
                    "To",
                    value=controller.window.to_local,
                    on_change=lambda e: controller.set_window(to_local=e.value or ""),
                ).props('type=datetime-local step=1').classes("w-64")
            wire_label = ui.label("").classes("text-caption mt-1").style(
                f"color: {COLORS.text_muted}"
            )
            fetch_button = ui.button(
                "Fetch video", icon="download",
                on_click=controller.fetch_video,
            ).classes("mt-2").style(f"background: {COLORS.green}")
            fetch_error = error_label()
            fetch_info = ui.label("").classes("text-caption").style(
                f"color: {COLORS.green}"
            )

    def sync() -> None:
        status = controller.status
        if status in (SessionStatus.UNINITIALIZED, SessionStatus.CONNECTING):
            status_label.text = "Loading machine resources..."
        elif controller.connection_error:
            status_label.text = f"Error: {controller.connection_error}"
            status_label.style(f"color: {COLORS.red}")
        elif status is SessionStatus.EMPTY:
            status_label.text = "No machine selected."
        elif not controller.resources:
            status_label.text = "No resources found on this machine."
        else:
            status_label.text = f"{len(controller.resources)} resource(s) available"
        status_label.set_visibility(status is not SessionStatus.READY or not controller.resources)

        options = {r.name: r.name for r in controller.resources}
        if resource_select.options != options:
            resource_select.set_options(options)
        resource_select.set_visibility(status is SessionStatus.READY)
        set_error(select_error, controller.selection_error)
        actions.set_visibility(bool(controller.selected_name))

        state = controller.state(ActionKind.GET_STORAGE_STATE)
        sync_trigger(state_button, "Get storage state", "Getting…", state.in_flight)
        set_error(state_error, state.error)
        state_output.text = controller.storage_state_text

        fetch = controller.state(ActionKind.FETCH)
        sync_trigger(fetch_button, "Fetch video", "Fetching…", fetch.in_flight)
        set_error(fetch_error, fetch.error)
        from_wire, to_wire = controller.wire_bounds
        wire_label.text = f"UTC: {from_wire or '--'} → {to_wire or '--'}"
        fetch_info.text = (
            f"Saved {fetch.result.filename} ({fetch.result.size_bytes} bytes)"
            if fetch.result is not None else ""
        )

    async def _start() -> None:
        await controller.start(machine_key)
        logger.info(
            "panel_ready",
            machine=machine_key,
            status=controller.status.value,
            resources=len(controller.resources),
        )

    sync()
    ui.timer(0.1, _start, once=True)
