"""Dashboard statistics derived from a release/job snapshot."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from steer_dashboard.core.phases import is_failed, is_succeeded

if TYPE_CHECKING:
    from steer_dashboard.integrations.steer.models import Release, TestJob

UNKNOWN_PHASE = "Unknown"


@dataclass(frozen=True)
class DashboardStats:
    """Counters shown on the dashboard."""

    releases: int = 0
    jobs: int = 0
    succeeded_jobs: int = 0
    failed_jobs: int = 0
    success_rate: int = 0
    release_phases: dict[str, int] = field(default_factory=dict)
    job_phases: dict[str, int] = field(default_factory=dict)

    @property
    def completed_jobs(self) -> int:
        return self.succeeded_jobs + self.failed_jobs


def success_rate(succeeded: int, failed: int) -> int:
    """Percentage of completed jobs that succeeded.

    Rounds half up. Defined as 0 when no job has completed.
    """
    completed = succeeded + failed
    if completed <= 0:
        return 0
    return math.floor(100 * succeeded / completed + 0.5)


def _phase_histogram(phases: Sequence[str]) -> dict[str, int]:
    return dict(Counter(phase or UNKNOWN_PHASE for phase in phases))


def compute_stats(releases: Sequence[Release], jobs: Sequence[TestJob]) -> DashboardStats:
    """Compute dashboard counters for one snapshot."""
    succeeded = sum(1 for job in jobs if is_succeeded(job))
    failed = sum(1 for job in jobs if is_failed(job))
    return DashboardStats(
        releases=len(releases),
        jobs=len(jobs),
        succeeded_jobs=succeeded,
        failed_jobs=failed,
        success_rate=success_rate(succeeded, failed),
        release_phases=_phase_histogram([r.status.phase for r in releases]),
        job_phases=_phase_histogram([j.status.phase for j in jobs]),
    )
