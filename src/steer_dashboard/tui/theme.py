"""Theme constants and style helpers for the dashboard.

Usage:
    from steer_dashboard.tui.theme import Colors, Styles

    DEFAULT_CSS = f'''
    .failed {{ color: {Colors.ERROR}; }}
    '''
"""

from __future__ import annotations

from steer_dashboard.core.display import toned
from steer_dashboard.core.phases import Tone


class Colors:
    """Color constants for TUI theming (Textual CSS variables)."""

    SUCCESS = "$success"
    WARNING = "$warning"
    ERROR = "$error"
    PRIMARY = "$primary"

    TEXT_MUTED = "$text-muted"
    SURFACE = "$surface"


class Styles:
    """Rich markup helpers."""

    @staticmethod
    def tone(text: str, tone: Tone) -> str:
        return toned(text, tone)

    @staticmethod
    def muted(text: str) -> str:
        return f"[dim]{text}[/dim]"

    @staticmethod
    def bold(text: str) -> str:
        return f"[bold]{text}[/bold]"

    @staticmethod
    def error(text: str) -> str:
        return f"[red]{text}[/red]"
