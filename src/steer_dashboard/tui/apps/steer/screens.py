"""Screen definitions for the Steer dashboard TUI.

The dashboard and both list screens each own a refresh controller, so
each keeps its own snapshot and its own timer. The job detail screen is a
static view of one job that re-fetches it on demand.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import partial
from typing import TYPE_CHECKING, Any, ClassVar

import structlog
from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, ScrollableContainer
from textual.widgets import DataTable, Label, Static

from steer_dashboard.core.display import (
    format_timestamp,
    job_fields,
    job_row,
    or_dash,
    phase_markup,
    release_row,
)
from steer_dashboard.core.phases import Tone, classify, classify_result
from steer_dashboard.integrations.steer.exceptions import SteerAPIError
from steer_dashboard.integrations.steer.models import (
    Release,
    ResourceKind,
    SteerResource,
    TestJob,
)
from steer_dashboard.tui.apps.steer.widgets import PhaseBreakdown, RefreshStatus, StatCard
from steer_dashboard.tui.base import BaseScreen, RefreshingScreen
from steer_dashboard.tui.components.modal import CONFIRM, Modal
from steer_dashboard.tui.theme import Styles

if TYPE_CHECKING:
    from steer_dashboard.core.refresh import Snapshot
    from steer_dashboard.integrations.steer.client import SteerClient

logger = structlog.get_logger()

# (label, width) per table column
RELEASE_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Name", 28),
    ("Namespace", 15),
    ("Chart", 28),
    ("Status", 12),
    ("Deployed At", 22),
]

TEST_JOB_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Name", 28),
    ("Namespace", 15),
    ("Target Release", 34),
    ("Schedule", 24),
    ("Status", 12),
]

RESULT_COLUMNS: list[tuple[str, int]] = [
    ("Name", 30),
    ("Phase", 12),
    ("Started", 22),
    ("Completed", 22),
    ("Message", 40),
]

HOOK_COLUMNS: list[tuple[str, int]] = [
    ("Name", 30),
    ("Phase", 12),
    ("Message", 60),
]


# ============================================================================
# Dashboard
# ============================================================================


class DashboardScreen(RefreshingScreen):
    """Overview counters and phase breakdowns with auto-refresh."""

    BINDINGS = [
        ("r", "refresh", "Refresh"),
    ]

    def compose(self) -> ComposeResult:
        """Compose the dashboard layout."""
        yield Container(
            Horizontal(
                StatCard("Total Releases", id="stat-releases"),
                StatCard("Total Jobs", id="stat-jobs"),
                StatCard("Success Rate", "0%", id="stat-success-rate"),
                StatCard("Failed Jobs", id="stat-failed"),
                id="dashboard-stats",
            ),
            Horizontal(
                PhaseBreakdown(
                    "Release Phases",
                    partial(classify, ResourceKind.RELEASE),
                    id="release-phases",
                ),
                PhaseBreakdown("Test Job Phases", classify_result, id="job-phases"),
                id="dashboard-phases",
            ),
            RefreshStatus(id="refresh-line"),
            id="dashboard-container",
        )

    def render_snapshot(self, snapshot: Snapshot) -> None:
        stats = snapshot.stats
        self.query_one("#stat-releases", StatCard).set_value(str(stats.releases))
        self.query_one("#stat-jobs", StatCard).set_value(str(stats.jobs))
        self.query_one("#stat-success-rate", StatCard).set_value(
            f"{stats.success_rate}%",
            Tone.SUCCESS if stats.completed_jobs else None,
        )
        self.query_one("#stat-failed", StatCard).set_value(
            str(stats.failed_jobs),
            Tone.DANGER if stats.failed_jobs else None,
        )
        self.query_one("#release-phases", PhaseBreakdown).update_phases(stats.release_phases)
        self.query_one("#job-phases", PhaseBreakdown).update_phases(stats.job_phases)
        self.query_one("#refresh-line", RefreshStatus).show(snapshot)


# ============================================================================
# Resource lists
# ============================================================================


class ResourceListScreen(RefreshingScreen):
    """Table of one resource kind with create, delete and manual refresh."""

    BINDINGS = [
        ("j", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
        ("n", "create", "New"),
        ("d", "delete", "Delete"),
        ("r", "refresh", "Refresh"),
        ("escape", "back", "Back"),
    ]

    KIND: ClassVar[ResourceKind]
    COLUMNS: ClassVar[list[tuple[str, int]]]
    TITLE_TEXT: ClassVar[str]

    def __init__(self, client: SteerClient, interval: float) -> None:
        super().__init__(client, interval)
        self._items: Sequence[SteerResource] = []
        self._pending_delete: SteerResource | None = None

    def compose(self) -> ComposeResult:
        yield Container(
            Label(Styles.bold(self.TITLE_TEXT), id="list-title"),
            DataTable(id="resource-table"),
            Label("", id="status-bar"),
            RefreshStatus(id="refresh-line"),
            id="resource-list-container",
        )

    def on_mount(self) -> None:
        """Configure the table; refreshing starts from the base handler."""
        table = self.query_one("#resource-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        for label, width in self.COLUMNS:
            table.add_column(label, width=width)

    def items(self, snapshot: Snapshot) -> Sequence[SteerResource]:
        """Resources of this screen's kind in a snapshot."""
        raise NotImplementedError

    def row(self, resource: Any, snapshot: Snapshot) -> tuple[str, ...]:
        """Table row for one resource."""
        raise NotImplementedError

    def render_snapshot(self, snapshot: Snapshot) -> None:
        table = self.query_one("#resource-table", DataTable)
        cursor = table.cursor_row
        table.clear()
        self._items = self.items(snapshot)
        for resource in self._items:
            table.add_row(*self.row(resource, snapshot), key=resource.key)
        if self._items:
            table.move_cursor(row=min(cursor, len(self._items) - 1))
        self.query_one("#status-bar", Label).update(
            Styles.muted(f"{len(self._items)} {self.KIND.display_name}")
        )
        self.query_one("#refresh-line", RefreshStatus).show(snapshot)

    def selected(self) -> SteerResource | None:
        """The resource under the cursor, if any."""
        table = self.query_one("#resource-table", DataTable)
        if table.cursor_row is None or not 0 <= table.cursor_row < len(self._items):
            return None
        return self._items[table.cursor_row]

    # =========================================================================
    # Keyboard Actions
    # =========================================================================

    def action_cursor_down(self) -> None:
        self.query_one("#resource-table", DataTable).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#resource-table", DataTable).action_cursor_up()

    def action_back(self) -> None:
        self.go_back()

    def action_create(self) -> None:
        """Open the create form for this kind."""
        from steer_dashboard.tui.apps.steer.create_screen import ResourceCreateScreen

        self.app.push_screen(
            ResourceCreateScreen(self.KIND, self.controller),
            callback=self._handle_create_dismissed,
        )

    def _handle_create_dismissed(self, result: str | None) -> None:
        if result:
            self.notify_user(f"Created {self.KIND.kind_name} '{result}'")

    def action_delete(self) -> None:
        """Delete the selected resource after confirmation."""
        resource = self.selected()
        if resource is None:
            return
        self._pending_delete = resource
        self.app.push_screen(
            Modal.confirm_delete(self.KIND.kind_name, resource.key),
            callback=self._handle_delete_result,
        )

    def _handle_delete_result(self, result: str | None) -> None:
        resource, self._pending_delete = self._pending_delete, None
        if result == CONFIRM and resource is not None:
            self.run_worker(self._delete(resource), group="delete")

    async def _delete(self, resource: SteerResource) -> None:
        if self.KIND is ResourceKind.RELEASE:
            deleted = await self.controller.delete_release(resource.namespace, resource.name)
        else:
            deleted = await self.controller.delete_test_job(resource.namespace, resource.name)
        if deleted:
            self.notify_user(f"Deleted {self.KIND.kind_name} '{resource.key}'")


class ReleaseListScreen(ResourceListScreen):
    """All HelmReleases."""

    KIND = ResourceKind.RELEASE
    COLUMNS = RELEASE_TABLE_COLUMNS
    TITLE_TEXT = "Helm Releases"

    def items(self, snapshot: Snapshot) -> Sequence[SteerResource]:
        return snapshot.releases

    def row(self, resource: Release, snapshot: Snapshot) -> tuple[str, ...]:
        return release_row(resource)


class TestJobListScreen(ResourceListScreen):
    """All HelmTestJobs; enter opens the job detail."""

    __test__ = False

    KIND = ResourceKind.TEST_JOB
    COLUMNS = TEST_JOB_TABLE_COLUMNS
    TITLE_TEXT = "Helm Test Jobs"

    def items(self, snapshot: Snapshot) -> Sequence[SteerResource]:
        return snapshot.jobs

    def row(self, resource: TestJob, snapshot: Snapshot) -> tuple[str, ...]:
        return job_row(resource, snapshot.releases)

    def action_select(self) -> None:
        job = self.selected()
        if isinstance(job, TestJob):
            self.app.push_screen(
                TestJobDetailScreen(job, self._client, self.controller.snapshot.releases)
            )

    @on(DataTable.RowSelected)
    def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        self.action_select()


# ============================================================================
# Test job detail
# ============================================================================


def job_detail_text(job: TestJob, releases: Sequence[Release]) -> str:
    """Label/value lines for the job detail header."""
    return "\n".join(f"{Styles.bold(label + ':')} {value}" for label, value in job_fields(job, releases))


class TestJobDetailScreen(BaseScreen[None]):
    """Status, test results and hook results of one test job."""

    __test__ = False

    BINDINGS = [
        ("escape", "back", "Back"),
        ("r", "refresh", "Refresh"),
    ]

    def __init__(
        self,
        job: TestJob,
        client: SteerClient,
        releases: Sequence[Release] = (),
    ) -> None:
        """Initialize the detail screen.

        Args:
            job: Job to show.
            client: Used to re-fetch the job on refresh.
            releases: Release snapshot used to resolve the target release.
        """
        super().__init__()
        self._job = job
        self._client = client
        self._releases = releases
        self._log = logger.bind(screen="test_job_detail", job=job.key)

    def compose(self) -> ComposeResult:
        with ScrollableContainer(id="detail-container"):
            yield Static("", id="detail-summary")
            yield Label(Styles.bold("Test Results"), classes="panel-title")
            yield DataTable(id="results-table")
            yield Label(Styles.bold("Hook Results"), classes="panel-title")
            yield DataTable(id="hooks-table")

    def on_mount(self) -> None:
        for table_id, columns in (("#results-table", RESULT_COLUMNS), ("#hooks-table", HOOK_COLUMNS)):
            table = self.query_one(table_id, DataTable)
            table.cursor_type = "row"
            for label, width in columns:
                table.add_column(label, width=width)
        self._populate()

    def _populate(self) -> None:
        job = self._job
        self.query_one("#detail-summary", Static).update(job_detail_text(job, self._releases))

        results = self.query_one("#results-table", DataTable)
        results.clear()
        for result in job.status.test_results:
            results.add_row(
                escape(result.name),
                phase_markup(result.phase, classify_result(result.phase)),
                format_timestamp(result.started_at_time),
                format_timestamp(result.completed_at_time),
                or_dash(result.message),
            )

        hooks = self.query_one("#hooks-table", DataTable)
        hooks.clear()
        for hook in job.status.hook_results:
            hooks.add_row(
                escape(hook.name),
                phase_markup(hook.phase, classify_result(hook.phase)),
                or_dash(hook.message),
            )

    def action_back(self) -> None:
        self.go_back()

    async def action_refresh(self) -> None:
        """Re-fetch the job; keep showing the old copy on failure."""
        try:
            self._job = await self._client.test_jobs.get(self._job.namespace, self._job.name)
        except SteerAPIError as e:
            self._log.warning("job_refresh_failed", error=str(e))
            self.notify_user(f"Failed to refresh test job: {e.message}", severity="error")
            return
        self._populate()
