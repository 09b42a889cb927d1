"""Base classes for TUI screens and widgets.

Usage:
    from steer_dashboard.tui import BaseScreen, RefreshingScreen

    class MyScreen(RefreshingScreen):
        def compose(self) -> ComposeResult:
            yield DataTable()

        def render_snapshot(self, snapshot: Snapshot) -> None:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import structlog
from rich.markup import escape
from textual.app import ComposeResult
from textual.message import Message
from textual.screen import Screen
from textual.widget import Widget

from steer_dashboard.core.refresh import RefreshController

if TYPE_CHECKING:
    from textual.notifications import SeverityLevel

    from steer_dashboard.core.refresh import Snapshot
    from steer_dashboard.integrations.steer.client import SteerClient

logger = structlog.get_logger()

T = TypeVar("T")


class BaseWidget(Widget):
    """Base class for custom TUI widgets."""

    def post_event(self, message: Message) -> None:
        """Post a message event to the app."""
        self.post_message(message)

    def notify_user(
        self,
        message: str,
        severity: SeverityLevel = "information",
    ) -> None:
        """Show a notification to the user."""
        self.app.notify(escape(message), severity=severity)


class BaseScreen(Screen[T]):
    """Base class for TUI screens.

    Type Parameters:
        T: The type returned when the screen is dismissed.
    """

    def go_back(self) -> None:
        """Pop the current screen if there's a screen to return to."""
        if len(self.app.screen_stack) > 1:
            self.app.pop_screen()

    def notify_user(
        self,
        message: str,
        severity: SeverityLevel = "information",
    ) -> None:
        """Show a notification to the user.

        Args:
            message: Notification text.
            severity: One of "information", "warning", "error".
        """
        self.app.notify(escape(message), severity=severity)

    def compose(self) -> ComposeResult:
        """Compose the screen layout. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement compose()")


class RefreshingScreen(BaseScreen[None]):
    """Screen that owns a refresh controller for its lifetime.

    The controller starts when the screen mounts and stops when it
    unmounts, so a view that is gone never receives a late result.
    """

    def __init__(self, client: SteerClient, interval: float) -> None:
        """Initialize the screen.

        Args:
            client: Steer API client shared across screens.
            interval: Seconds between refresh cycles.
        """
        super().__init__()
        self._client = client
        self.controller = RefreshController(
            client,
            interval=interval,
            on_update=self._handle_update,
            on_error=self._handle_error,
        )
        self._log = logger.bind(screen=type(self).__name__)

    def on_mount(self) -> None:
        """Start refreshing in the background."""
        self.run_worker(self.controller.start(), group="refresh", exclusive=True)

    async def on_unmount(self) -> None:
        """Stop the controller before the screen goes away."""
        await self.controller.stop()

    def _handle_update(self, snapshot: Snapshot) -> None:
        if self.is_mounted:
            self.render_snapshot(snapshot)

    def _handle_error(self, message: str) -> None:
        self._log.warning("refresh_error", error=message)
        self.notify_user(message, severity="error")

    def render_snapshot(self, snapshot: Snapshot) -> None:
        """Redraw the screen from a snapshot. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement render_snapshot()")

    def action_refresh(self) -> None:
        """Run a refresh cycle now."""
        self.run_worker(self.controller.refresh(), group="refresh")
