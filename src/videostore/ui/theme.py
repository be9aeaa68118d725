"""Dark theme configuration for the web panel."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class _Colors:
    bg_primary: str = "#0d1117"
    bg_secondary: str = "#161b22"
    bg_card: str = "#1c2128"
    border: str = "#30363d"
    text_primary: str = "#e6edf3"
    text_secondary: str = "#8b949e"
    text_muted: str = "#484f58"
    blue: str = "#58a6ff"
    cyan: str = "#39c5cf"
    green: str = "#3fb950"
    red: str = "#f85149"
    yellow: str = "#d29922"
    purple: str = "#bc8cff"


COLORS = _Colors()

GLOBAL_CSS = """
body {
    background-color: #0d1117 !important;
    color: #e6edf3 !important;
    font-family: 'JetBrains Mono', 'Fira Code', monospace !important;
}
.q-card {
    background-color: #161b22 !important;
    border: 1px solid #30363d !important;
}
.q-header {
    background-color: #161b22 !important;
    border-bottom: 1px solid #30363d !important;
}
.q-btn {
    text-transform: none !important;
}
.state-dump {
    white-space: pre-wrap;
    font-family: 'JetBrains Mono', monospace;
    font-size: 13px;
}
"""
