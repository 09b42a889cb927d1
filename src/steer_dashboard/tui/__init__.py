"""Terminal user interface for the Steer dashboard.

Usage:
    from steer_dashboard.tui.apps.steer import SteerApp
"""

from steer_dashboard.tui.base import BaseScreen, BaseWidget, RefreshingScreen
from steer_dashboard.tui.theme import Colors, Styles

__all__ = [
    "BaseScreen",
    "BaseWidget",
    "Colors",
    "RefreshingScreen",
    "Styles",
]
