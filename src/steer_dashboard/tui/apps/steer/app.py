"""Main Textual application for the Steer dashboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from steer_dashboard.integrations.steer.config import DEFAULT_REFRESH_INTERVAL
from steer_dashboard.tui.apps.steer.screens import (
    DashboardScreen,
    ReleaseListScreen,
    TestJobListScreen,
)

if TYPE_CHECKING:
    from steer_dashboard.integrations.steer.client import SteerClient
    from steer_dashboard.tui.base import RefreshingScreen


class SteerApp(App[None]):
    """Dashboard for HelmRelease and HelmTestJob resources.

    Opens on the overview; ``1``/``2``/``3`` switch between the overview,
    the release list and the test job list. Each opened view polls on its
    own and stops polling when it is closed.

    Args:
        client: Steer API client shared by all screens. Closed when the app exits.
        refresh_interval: Seconds between refresh cycles.
    """

    TITLE = "Steer Dashboard"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("1", "show_dashboard", "Dashboard", show=True),
        Binding("2", "show_releases", "Releases", show=True),
        Binding("3", "show_jobs", "Test Jobs", show=True),
        Binding("question_mark", "help", "Help", show=True),
    ]

    def __init__(
        self,
        client: SteerClient,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
    ) -> None:
        super().__init__()
        self._client = client
        self._refresh_interval = refresh_interval

    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        """Open the overview."""
        self.push_screen(DashboardScreen(self._client, self._refresh_interval))

    async def on_unmount(self) -> None:
        """Close the shared client on exit."""
        await self._client.aclose()

    def _switch_to(self, screen_type: type[RefreshingScreen]) -> None:
        # Detail and form screens sit above the view; drop them first so the
        # replaced view unmounts and stops polling
        while len(self.screen_stack) > 2:
            self.pop_screen()
        if isinstance(self.screen, screen_type):
            return
        screen = screen_type(self._client, self._refresh_interval)
        if len(self.screen_stack) > 1:
            self.switch_screen(screen)
        else:
            self.push_screen(screen)

    def action_show_dashboard(self) -> None:
        self._switch_to(DashboardScreen)

    def action_show_releases(self) -> None:
        self._switch_to(ReleaseListScreen)

    def action_show_jobs(self) -> None:
        self._switch_to(TestJobListScreen)

    def action_help(self) -> None:
        """Show keyboard shortcut help."""
        self.notify(
            "1/2/3: dashboard/releases/jobs | j/k: navigate | Enter: details | "
            "n: new | d: delete | r: refresh | Esc: back | q: quit"
        )
