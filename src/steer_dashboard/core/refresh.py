"""Poll-refresh controller.

Keeps one view's snapshot of releases and test jobs current. Each cycle
fetches both collections concurrently, replaces whatever loaded, keeps the
previous copy of whatever failed, and recomputes the dashboard stats.

Cycles never overlap: a trigger that arrives while a cycle is in flight
waits for it and then runs a full cycle of its own, so results are applied
in the order the cycles started.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Self, TypeVar

import structlog

from steer_dashboard.core.stats import DashboardStats, compute_stats
from steer_dashboard.integrations.steer.config import DEFAULT_REFRESH_INTERVAL
from steer_dashboard.integrations.steer.exceptions import SteerAPIError
from steer_dashboard.integrations.steer.models import Release, ResourceKind, TestJob

if TYPE_CHECKING:
    from steer_dashboard.integrations.steer.client import SteerClient

logger = structlog.get_logger()

T = TypeVar("T")

UpdateListener = Callable[["Snapshot"], None]
ErrorListener = Callable[[str], None]


class RefreshState(str, Enum):
    """Lifecycle state of a refresh controller."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass(frozen=True)
class Snapshot:
    """Immutable view state published after every transition."""

    releases: tuple[Release, ...] = ()
    jobs: tuple[TestJob, ...] = ()
    stats: DashboardStats = field(default_factory=DashboardStats)
    state: RefreshState = RefreshState.IDLE
    error: str | None = None
    refreshed_at: datetime | None = None


def _failure_message(failures: Sequence[tuple[ResourceKind, Exception]]) -> str:
    kinds = " and ".join(kind.display_name for kind, _ in failures)
    reasons = "; ".join(str(error) for _, error in failures)
    return f"Failed to load {kinds}: {reasons}"


class RefreshController:
    """Owns the release/job snapshot of one view.

    Example:
        ```python
        async with RefreshController(client, on_update=render) as controller:
            ...
        ```
    """

    def __init__(
        self,
        client: SteerClient,
        interval: float = DEFAULT_REFRESH_INTERVAL,
        on_update: UpdateListener | None = None,
        on_error: ErrorListener | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            client: Gateway used for every fetch and user action.
            interval: Seconds between automatic refresh cycles.
            on_update: Called with the new snapshot after every transition.
            on_error: Called once per failed cycle or failed user action.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._client = client
        self.interval = interval
        self._on_update = on_update
        self._on_error = on_error
        self._snapshot = Snapshot()
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    # =========================================================================
    # State
    # =========================================================================

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def state(self) -> RefreshState:
        return self._snapshot.state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _publish(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        if self._on_update is not None:
            self._on_update(snapshot)

    def _report(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)

    # =========================================================================
    # Refresh cycle
    # =========================================================================

    async def refresh(self) -> Snapshot:
        """Run one refresh cycle and return the resulting snapshot.

        Never raises for gateway failures; they are reported through
        ``on_error`` and reflected in the ``ERRORED`` state. Once the
        controller is stopped the cycle is a no-op.
        """
        async with self._lock:
            if self._closed:
                return self._snapshot

            self._publish(replace(self._snapshot, state=RefreshState.LOADING))

            releases_result, jobs_result = await asyncio.gather(
                self._client.releases.list(),
                self._client.test_jobs.list(),
                return_exceptions=True,
            )

            if self._closed:
                logger.debug("Discarding refresh result after stop")
                return self._snapshot

            releases = self._snapshot.releases
            jobs = self._snapshot.jobs
            failures: list[tuple[ResourceKind, Exception]] = []

            for kind, result in (
                (ResourceKind.RELEASE, releases_result),
                (ResourceKind.TEST_JOB, jobs_result),
            ):
                if isinstance(result, Exception):
                    failures.append((kind, result))
                elif isinstance(result, BaseException):
                    raise result
                elif kind is ResourceKind.RELEASE:
                    releases = tuple(result)
                else:
                    jobs = tuple(result)

            error = _failure_message(failures) if failures else None
            snapshot = Snapshot(
                releases=releases,
                jobs=jobs,
                stats=compute_stats(releases, jobs),
                state=RefreshState.ERRORED if failures else RefreshState.LOADED,
                error=error,
                refreshed_at=datetime.now(UTC),
            )

            if error is not None:
                logger.warning(
                    "Refresh cycle failed",
                    failed=[kind.value for kind, _ in failures],
                    error=error,
                )
            else:
                logger.debug("Refresh cycle complete", releases=len(releases), jobs=len(jobs))

            self._publish(snapshot)
            if error is not None:
                self._report(error)
            return snapshot

    async def _poll(self) -> None:
        while not self._closed:
            await asyncio.sleep(self.interval)
            try:
                await self.refresh()
            except Exception:
                logger.exception("Unexpected error in refresh cycle")

    async def start(self) -> Snapshot:
        """Refresh immediately, then keep refreshing every ``interval`` seconds.

        Raises:
            RuntimeError: If the controller was already stopped.
        """
        if self._closed:
            raise RuntimeError("Refresh controller has been stopped")
        snapshot = await self.refresh()
        if self._task is None:
            self._task = asyncio.create_task(self._poll())
            logger.debug("Refresh timer started", interval=self.interval)
        return snapshot

    async def stop(self) -> None:
        """Stop the timer; no later result is applied and no listener called."""
        self._closed = True
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.debug("Refresh controller stopped")

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()

    # =========================================================================
    # User actions
    # =========================================================================

    async def _act(self, action: str, call: Callable[[], Awaitable[T]]) -> T | None:
        """Run a user action and refresh on success.

        Returns:
            The action's result, or None if it failed (already reported).
        """
        if self._closed:
            return None
        try:
            result = await call()
        except SteerAPIError as e:
            logger.warning("User action failed", action=action, error=str(e))
            if not self._closed:
                self._report(f"Failed to {action}: {e.message}")
            return None
        logger.info("User action succeeded", action=action)
        await self.refresh()
        return result

    async def create_release(self, release: Release) -> Release | None:
        return await self._act(
            f"create release {release.key}",
            lambda: self._client.releases.create(release),
        )

    async def create_test_job(self, job: TestJob) -> TestJob | None:
        return await self._act(
            f"create test job {job.key}",
            lambda: self._client.test_jobs.create(job),
        )

    async def delete_release(self, namespace: str, name: str) -> bool:
        """Delete a release; True on success."""
        result = await self._act(
            f"delete release {namespace}/{name}",
            lambda: self._deleted(self._client.releases.delete(namespace, name)),
        )
        return result is True

    async def delete_test_job(self, namespace: str, name: str) -> bool:
        """Delete a test job; True on success."""
        result = await self._act(
            f"delete test job {namespace}/{name}",
            lambda: self._deleted(self._client.test_jobs.delete(namespace, name)),
        )
        return result is True

    @staticmethod
    async def _deleted(call: Awaitable[None]) -> bool:
        await call
        return True
