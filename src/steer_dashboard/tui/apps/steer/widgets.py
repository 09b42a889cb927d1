"""Custom widgets for the Steer dashboard TUI.

Counter cards, phase breakdown panels and the refresh status line shown
at the bottom of every refreshing screen.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label

from steer_dashboard.core.display import phase_markup
from steer_dashboard.core.phases import Tone
from steer_dashboard.core.refresh import RefreshState
from steer_dashboard.tui.base import BaseWidget
from steer_dashboard.tui.theme import Styles

if TYPE_CHECKING:
    from steer_dashboard.core.refresh import Snapshot


class StatCard(BaseWidget):
    """A titled counter, e.g. ``Releases 4``."""

    DEFAULT_CSS = """
    StatCard {
        width: 1fr;
        height: 5;
        border: round $primary;
        padding: 0 1;
    }

    StatCard .stat-title {
        color: $text-muted;
    }

    StatCard .stat-value {
        text-style: bold;
    }
    """

    def __init__(self, title: str, value: str = "0", **kwargs: Any) -> None:
        """Initialize the card.

        Args:
            title: Caption above the value.
            value: Initial value text.
            **kwargs: Additional widget arguments.
        """
        super().__init__(**kwargs)
        self._title = title
        self._value = value

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(self._title, classes="stat-title"),
            Label(self._value, classes="stat-value"),
        )

    @property
    def value(self) -> str:
        return self._value

    def set_value(self, value: str, tone: Tone | None = None) -> None:
        """Replace the displayed value, optionally in a tone colour."""
        self._value = value
        text = Styles.tone(value, tone) if tone is not None else value
        self.query_one(".stat-value", Label).update(text)


class PhaseBreakdown(BaseWidget):
    """Per-phase counts for one resource kind."""

    DEFAULT_CSS = """
    PhaseBreakdown {
        width: 1fr;
        height: auto;
        border: round $surface-lighten-1;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        title: str,
        classify: Callable[[str | None], Tone],
        **kwargs: Any,
    ) -> None:
        """Initialize the panel.

        Args:
            title: Panel heading.
            classify: Maps a phase to its tone.
            **kwargs: Additional widget arguments.
        """
        super().__init__(**kwargs)
        self._title = title
        self._classify = classify

    def compose(self) -> ComposeResult:
        yield Label(Styles.bold(self._title), classes="panel-title")
        yield Label(Styles.muted("No data"), classes="phase-lines")

    def update_phases(self, phases: Mapping[str, int]) -> None:
        """Redraw from a ``phase -> count`` histogram, busiest first."""
        if not phases:
            text = Styles.muted("No data")
        else:
            ordered = sorted(phases.items(), key=lambda item: (-item[1], item[0]))
            text = "\n".join(
                f"{count:>4}  {phase_markup(phase, self._classify(phase))}"
                for phase, count in ordered
            )
        self.query_one(".phase-lines", Label).update(text)


class RefreshStatus(BaseWidget):
    """One-line summary of the owning screen's refresh state."""

    DEFAULT_CSS = """
    RefreshStatus {
        height: 1;
        width: 100%;
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label(Styles.muted("Waiting for first refresh"), id="refresh-status")

    @staticmethod
    def describe(snapshot: Snapshot) -> str:
        """Status text for a snapshot."""
        updated = (
            snapshot.refreshed_at.astimezone().strftime("%H:%M:%S")
            if snapshot.refreshed_at
            else "never"
        )
        if snapshot.state is RefreshState.LOADING:
            return Styles.muted(f"Refreshing... (last update {updated})")
        if snapshot.state is RefreshState.ERRORED:
            return Styles.error(f"Refresh failed at {updated}, showing last known data")
        if snapshot.state is RefreshState.LOADED:
            return Styles.muted(f"Updated {updated}")
        return Styles.muted("Waiting for first refresh")

    def show(self, snapshot: Snapshot) -> None:
        self.query_one("#refresh-status", Label).update(self.describe(snapshot))
