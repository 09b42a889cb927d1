"""Fixtures for the Steer dashboard TUI tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from textual.app import App, ComposeResult
from textual.screen import Screen
from textual.widgets import Label

from steer_dashboard.integrations.steer.models import Release, TestJob


class ScreenHostApp(App[None]):
    """Minimal app that opens one screen on mount."""

    def __init__(self, screen: Screen[None]) -> None:
        super().__init__()
        self.hosted = screen

    def compose(self) -> ComposeResult:
        yield Label("Host")

    def on_mount(self) -> None:
        self.push_screen(self.hosted)


@pytest.fixture
def host_app() -> type[ScreenHostApp]:
    return ScreenHostApp


@pytest.fixture
def mock_client(
    make_release: Callable[..., Release],
    make_job: Callable[..., TestJob],
) -> MagicMock:
    """A Steer client whose calls resolve immediately."""
    releases = [make_release("web"), make_release("api", phase="Failed")]
    jobs = [
        make_job("smoke", phase="Succeeded"),
        make_job("load", phase="Failed"),
        make_job("orphan", phase="Running", release=("prod", "gone")),
    ]

    client = MagicMock()
    client.releases.list = AsyncMock(return_value=releases)
    client.test_jobs.list = AsyncMock(return_value=jobs)
    client.releases.create = AsyncMock(side_effect=lambda release: release)
    client.test_jobs.create = AsyncMock(side_effect=lambda job: job)
    client.releases.delete = AsyncMock(return_value=None)
    client.test_jobs.delete = AsyncMock(return_value=None)
    client.test_jobs.get = AsyncMock(return_value=jobs[0])
    client.aclose = AsyncMock()
    return client
