"""API routes for machine resources, storage state and clip downloads."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from videostore.config import get_settings
from videostore.core.payload import VIDEO_MIME_TYPE, decode_video, video_filename
from videostore.core.session import ResourceSession
from videostore.core.time_range import to_wire_format
from videostore.exceptions import ValidationError
from videostore.models.session import ResourceRef, SessionStatus

router = APIRouter(prefix="/machines", tags=["machines"])


@asynccontextmanager
async def _open_session(request: Request, machine_key: str) -> AsyncIterator[ResourceSession]:
    """Open a session for one request and always release it."""
    session = ResourceSession(request.app.state.connector)
    try:
        await session.initialize(machine_key, get_settings().credential_provider())
        yield session
    finally:
        await session.close()


@router.get("/{machine_key}/resources")
async def list_resources(request: Request, machine_key: str) -> list[ResourceRef]:
    """List command-capable resources on the machine."""
    async with _open_session(request, machine_key) as session:
        if session.status is SessionStatus.EMPTY:
            return []
        return list(session.resources)


@router.get("/{machine_key}/resources/{resource_name}/storage-state")
async def get_storage_state(
    request: Request,
    machine_key: str,
    resource_name: str,
) -> dict[str, Any]:
    """Return the resource's storage state verbatim."""
    async with _open_session(request, machine_key) as session:
        dispatcher = session.select(resource_name)
        return await dispatcher.get_storage_state()


@router.get("/{machine_key}/resources/{resource_name}/video")
async def fetch_video(
    request: Request,
    machine_key: str,
    resource_name: str,
    from_local: str = Query(..., alias="from", description="Local start, YYYY-MM-DDTHH:MM:SS"),
    to_local: str = Query(..., alias="to", description="Local end, YYYY-MM-DDTHH:MM:SS"),
) -> Response:
    """Fetch the clip for a local time window as an MP4 download."""
    from_wire = to_wire_format(from_local)
    to_wire = to_wire_format(to_local)
    if not from_wire or not to_wire:
        raise ValidationError("select a valid time range")

    async with _open_session(request, machine_key) as session:
        dispatcher = session.select(resource_name)
        result = await dispatcher.fetch(from_wire, to_wire)

    filename = video_filename(resource_name, from_wire, to_wire)
    return Response(
        content=decode_video(result.video_base64),
        media_type=VIDEO_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
