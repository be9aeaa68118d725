"""Local time-window handling and the device's UTC wire format.

The video-store ``fetch`` command expects bounds as ``YYYY-MM-DD_HH-MM-SSZ``
in UTC. Operators enter bounds as local ``YYYY-MM-DDTHH:MM:SS`` text, so the
conversion here is pure and recomputed whenever the window is read.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo

from pydantic import BaseModel

LOCAL_FORMAT = "%Y-%m-%dT%H:%M:%S"
WIRE_FORMAT = "%Y-%m-%d_%H-%M-%SZ"

# Browser datetime pickers drop the seconds field when it is :00
_LOCAL_INPUT_FORMATS = (LOCAL_FORMAT, "%Y-%m-%dT%H:%M")

DEFAULT_WINDOW_SECONDS = 60


def _parse_local(text: str, tz: tzinfo | None) -> datetime | None:
    for fmt in _LOCAL_INPUT_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if tz is not None:
            return parsed.replace(tzinfo=tz)
        return parsed.astimezone()
    return None


def to_wire_format(local_text: str | None, tz: tzinfo | None = None) -> str:
    """Convert local date-time text to the UTC wire format.

    Args:
        local_text: ``YYYY-MM-DDTHH:MM:SS`` in the local timezone.
        tz: Zone to interpret *local_text* in. Defaults to the process zone.

    Returns:
        ``YYYY-MM-DD_HH-MM-SSZ``, or ``""`` if the input cannot be parsed.
    """
    if not local_text or not isinstance(local_text, str):
        return ""
    try:
        local = _parse_local(local_text.strip(), tz)
        if local is None:
            return ""
        utc = local.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        return ""
    return f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}_{utc.hour:02d}-{utc.minute:02d}-{utc.second:02d}Z"


def parse_wire_format(wire: str) -> datetime:
    """Parse a wire-format string back into an aware UTC datetime.

    Raises:
        ValueError: If *wire* is not in ``YYYY-MM-DD_HH-MM-SSZ`` form.
    """
    return datetime.strptime(wire, WIRE_FORMAT).replace(tzinfo=timezone.utc)


def format_local(moment: datetime, tz: tzinfo | None = None) -> str:
    """Render *moment* as zero-padded local ``YYYY-MM-DDTHH:MM:SS`` text."""
    local = moment.astimezone(tz) if tz is not None or moment.tzinfo else moment
    return local.strftime(LOCAL_FORMAT)


class TimeWindow(BaseModel):
    """Operator-entered time bounds, kept as local text."""

    from_local: str = ""
    to_local: str = ""

    def wire_bounds(self, tz: tzinfo | None = None) -> tuple[str, str]:
        """Both bounds in wire format, interpreted in *tz*."""
        return to_wire_format(self.from_local, tz), to_wire_format(self.to_local, tz)


def default_window(
    now: datetime | None = None,
    seconds: int = DEFAULT_WINDOW_SECONDS,
    tz: tzinfo | None = None,
) -> TimeWindow:
    """Window ending at *now* and starting *seconds* earlier."""
    if now is None:
        now = datetime.now(tz) if tz is not None else datetime.now()
    start = now - timedelta(seconds=seconds)
    return TimeWindow(
        from_local=format_local(start, tz),
        to_local=format_local(now, tz),
    )
