"""Machine connection backends.

Probes for the Viam SDK at runtime so the rest of the package imports
cleanly when the optional extra is not installed.
"""

from __future__ import annotations

from videostore.transport.base import DeviceConnection, DeviceConnector

_viam_available: bool | None = None


def is_viam_available() -> bool:
    """Check whether the Viam SDK can be imported."""
    global _viam_available
    if _viam_available is None:
        try:
            import viam  # noqa: F401
            _viam_available = True
        except ImportError:
            _viam_available = False
    return _viam_available


def default_connector() -> DeviceConnector:
    """Return the connector used when none is injected.

    Raises:
        RuntimeError: If no backend is installed.
    """
    if not is_viam_available():
        raise RuntimeError(
            "No machine connection backend installed. "
            "Install the 'viam' extra: pip install videostore[viam]"
        )
    from videostore.transport.viam import ViamConnector
    return ViamConnector()


__all__ = [
    "DeviceConnection",
    "DeviceConnector",
    "default_connector",
    "is_viam_available",
]
