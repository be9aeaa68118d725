"""Browser-side materialization of downloaded clips."""

from __future__ import annotations

from nicegui import ui

from videostore.core.payload import Materializer


class BrowserMaterializer(Materializer):
    """Sends bytes to the operator's browser as a file download.

    Must be called from within a NiceGUI client context (an event handler
    or timer of the page that owns the controller).
    """

    def materialize(self, data: bytes, filename: str, mime_type: str) -> None:
        ui.download.content(data, filename, media_type=mime_type)
