"""Shared UI helpers for panel pages."""

from __future__ import annotations

from nicegui import ui

from videostore.ui.theme import COLORS


def card_style() -> str:
    """Return the standard card style string."""
    return (
        f"background: {COLORS.bg_secondary}; "
        f"border: 1px solid {COLORS.border}"
    )


def card_header(title: str, icon: str) -> None:
    """Render a card section header with icon."""
    with ui.row().classes("items-center gap-2 mb-2"):
        ui.icon(icon).classes("text-lg").style(f"color: {COLORS.cyan}")
        ui.label(title).classes("text-subtitle2").style(
            f"color: {COLORS.text_primary}; font-weight: 600"
        )


def error_label() -> ui.label:
    """Create a hidden error label; show it with :func:`set_error`."""
    label = ui.label("").classes("text-caption").style(f"color: {COLORS.red}")
    label.set_visibility(False)
    return label


def set_error(label: ui.label, message: str | None) -> None:
    """Show *message* on *label*, or hide it when there is none."""
    label.text = f"Error: {message}" if message else ""
    label.set_visibility(bool(message))


def sync_trigger(button: ui.button, idle_text: str, busy_text: str, busy: bool) -> None:
    """Disable *button* and swap its text while its action is in flight."""
    button.text = busy_text if busy else idle_text
    button.set_enabled(not busy)
