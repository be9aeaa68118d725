"""videostore CLI - serve the panel or drive a video store from a shell."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

import click

from videostore.config import Settings, configure, get_settings
from videostore.core.controller import SessionController
from videostore.core.payload import DirectoryMaterializer
from videostore.core.session import ResourceSession
from videostore.core.time_range import TimeWindow, default_window
from videostore.models.session import ActionKind, ActionStatus, SessionStatus
from videostore.utils.logging import setup_logging

T = TypeVar("T")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option(
    "--credentials", "credentials_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file mapping machine keys to credential records",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, json_output: bool, credentials_file: Path | None) -> None:
    """videostore - remote video-store control panel."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["json_output"] = json_output
    ctx.obj.setdefault("connector", None)

    settings = get_settings()
    updates: dict[str, object] = {}
    if credentials_file is not None:
        updates["credentials_file"] = credentials_file
    if debug:
        updates["log_level"] = "DEBUG"
    if updates:
        settings = settings.model_copy(update=updates)
        configure(settings)
    setup_logging(level=settings.log_level, json_output=json_output)


def _run_session(
    ctx: click.Context,
    machine_key: str,
    action: Callable[[SessionController], Awaitable[T]],
    download_dir: Path | None = None,
    window: TimeWindow | None = None,
) -> T:
    """Start a controller for *machine_key*, run *action*, always close."""
    settings: Settings = get_settings()

    async def _main() -> T:
        controller = SessionController(
            ResourceSession(ctx.obj.get("connector")),
            settings.credential_provider(),
            DirectoryMaterializer(download_dir or settings.download_dir),
            window=window,
        )
        try:
            await controller.start(machine_key)
            if controller.connection_error:
                raise click.ClickException(controller.connection_error)
            return await action(controller)
        finally:
            await controller.close()

    return asyncio.run(_main())


def _select(controller: SessionController, resource: str) -> None:
    if controller.select(resource) is None:
        raise click.ClickException(controller.selection_error or f"unknown resource: {resource}")


@cli.command()
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Bind port")
@click.option("--no-ui", is_flag=True, help="Serve the REST API only")
def serve(host: str | None, port: int | None, no_ui: bool) -> None:
    """Serve the web panel and REST API."""
    import uvicorn

    from videostore.api.app import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(enable_ui=not no_ui),
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@cli.command()
@click.argument("machine_key")
@click.pass_context
def resources(ctx: click.Context, machine_key: str) -> None:
    """List command-capable resources on a machine."""

    async def action(controller: SessionController):
        return controller.status, list(controller.resources)

    status, refs = _run_session(ctx, machine_key, action)

    if ctx.obj.get("json_output"):
        click.echo(json.dumps([r.model_dump() for r in refs], indent=2))
        return
    if status is SessionStatus.EMPTY or not refs:
        click.echo("No resources found.")
        return
    click.echo(f"Found {len(refs)} resource(s):")
    for ref in refs:
        click.echo(f"  {ref.name}")


@cli.command("storage-state")
@click.argument("machine_key")
@click.argument("resource")
@click.pass_context
def storage_state(ctx: click.Context, machine_key: str, resource: str) -> None:
    """Show the storage state of a video-store resource."""

    async def action(controller: SessionController):
        _select(controller, resource)
        state = await controller.get_storage_state()
        if state.status is not ActionStatus.SUCCEEDED:
            raise click.ClickException(state.error or "failed to get storage state")
        return controller.storage_state_text

    click.echo(_run_session(ctx, machine_key, action))


@cli.command()
@click.argument("machine_key")
@click.argument("resource")
@click.option("--from", "from_local", default=None, help="Local start, YYYY-MM-DDTHH:MM:SS")
@click.option("--to", "to_local", default=None, help="Local end, YYYY-MM-DDTHH:MM:SS")
@click.option(
    "--out", "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to save the clip into",
)
@click.pass_context
def fetch(
    ctx: click.Context,
    machine_key: str,
    resource: str,
    from_local: str | None,
    to_local: str | None,
    out_dir: Path | None,
) -> None:
    """Fetch a clip for a local time window (default: the last minute)."""
    window = default_window()
    window = TimeWindow(
        from_local=from_local if from_local is not None else window.from_local,
        to_local=to_local if to_local is not None else window.to_local,
    )

    async def action(controller: SessionController):
        _select(controller, resource)
        state = await controller.fetch_video()
        if state.status is not ActionStatus.SUCCEEDED:
            raise click.ClickException(state.error or "failed to fetch video")
        return controller.state(ActionKind.FETCH).result

    download = _run_session(ctx, machine_key, action, download_dir=out_dir, window=window)

    if ctx.obj.get("json_output"):
        click.echo(json.dumps(download.model_dump(), indent=2))
    else:
        click.echo(f"Saved {download.filename} ({download.size_bytes} bytes)")


if __name__ == "__main__":
    cli()
