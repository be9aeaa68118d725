"""Shared page layout with header and content area."""

from __future__ import annotations

from typing import Callable

from nicegui import ui

from videostore.ui.theme import COLORS, GLOBAL_CSS


def page_layout(
    title: str,
    content_fn: Callable,
    machine_key: str | None = None,
) -> None:
    """Create the standard page layout with a header.

    Args:
        title: Page title displayed in the header.
        content_fn: Callable that builds the page content.
        machine_key: Acting machine identity shown in the header badge.
    """
    ui.add_css(GLOBAL_CSS)
    ui.dark_mode(True)
    ui.colors(primary=COLORS.cyan, secondary=COLORS.blue, accent=COLORS.purple)

    with ui.header(elevated=True).classes("q-pa-sm"):
        with ui.row().classes("w-full items-center no-wrap q-gutter-md"):
            ui.label("VIDEOSTORE").classes("text-h6 text-bold").style(
                f"color: {COLORS.cyan}; letter-spacing: 0.15em;"
            )
            ui.label("|").style(f"color: {COLORS.text_muted};")
            ui.label(title).classes("text-subtitle1").style(
                f"color: {COLORS.text_primary};"
            )

            ui.space()

            if machine_key:
                with ui.row().classes("items-center q-gutter-xs"):
                    ui.icon("link").style(
                        f"color: {COLORS.green}; font-size: 1rem;"
                    )
                    ui.label(machine_key).classes("text-caption").style(
                        f"color: {COLORS.green};"
                    )
            else:
                with ui.row().classes("items-center q-gutter-xs"):
                    ui.icon("link_off").style(
                        f"color: {COLORS.text_muted}; font-size: 1rem;"
                    )
                    ui.label("No machine").classes("text-caption").style(
                        f"color: {COLORS.text_muted};"
                    )

    with ui.column().classes("q-pa-md w-full").style(
        f"background-color: {COLORS.bg_primary};"
    ):
        content_fn()
