"""videostore - remote video-store control panel."""

__version__ = "0.1.0"
