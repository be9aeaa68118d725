"""NiceGUI web panel setup and page registration."""

from __future__ import annotations

from fastapi import FastAPI
from nicegui import Client, ui

from videostore.config import get_settings
from videostore.transport.base import DeviceConnector
from videostore.ui.layout import page_layout
from videostore.ui.theme import COLORS


def setup_ui(fastapi_app: FastAPI, connector: DeviceConnector | None = None) -> None:
    """Register NiceGUI pages with the FastAPI application."""

    @ui.page("/")
    def index():
        def content():
            ui.label(
                "Open /machine/<machine-key> to manage that machine's video store."
            ).style(f"color: {COLORS.text_secondary}")

        page_layout("Video Store", content)

    @ui.page("/machine/{machine_key}")
    def machine(machine_key: str, client: Client):
        from videostore.ui.pages.video_store import video_store_page
        video_store_page(machine_key, client, connector=connector)

    ui.run_with(
        fastapi_app,
        title="videostore - Video Store Panel",
        storage_secret=get_settings().storage_secret,
    )
