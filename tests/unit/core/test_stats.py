"""Unit tests for dashboard statistics."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from steer_dashboard.core.stats import DashboardStats, compute_stats, success_rate
from steer_dashboard.integrations.steer.models import Release, TestJob


class TestSuccessRate:
    """Tests for success_rate."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("succeeded", "failed", "expected"),
        [
            (0, 0, 0),
            (1, 0, 100),
            (0, 3, 0),
            (1, 1, 50),
            (3, 1, 75),
            (2, 1, 67),
            (1, 2, 33),
            (1, 7, 13),  # 12.5 rounds half up
            (7, 1, 88),  # 87.5 rounds half up
        ],
    )
    def test_rounding(self, succeeded: int, failed: int, expected: int) -> None:
        assert success_rate(succeeded, failed) == expected


class TestComputeStats:
    """Tests for compute_stats."""

    @pytest.mark.unit
    def test_empty(self) -> None:
        assert compute_stats([], []) == DashboardStats()

    @pytest.mark.unit
    def test_counts(
        self,
        make_release: Callable[..., Release],
        make_job: Callable[..., TestJob],
    ) -> None:
        releases = [
            make_release("a", phase="Installed"),
            make_release("b", phase="Installed"),
            make_release("c", phase="Failed"),
        ]
        jobs = [
            make_job("j1", phase="Succeeded"),
            make_job("j2", phase="Succeeded"),
            make_job("j3", phase="Failed"),
            make_job("j4", phase="Running"),
            make_job("j5", phase="Pending"),
        ]

        stats = compute_stats(releases, jobs)

        assert stats.releases == 3
        assert stats.jobs == 5
        assert stats.succeeded_jobs == 2
        assert stats.failed_jobs == 1
        assert stats.completed_jobs == 3
        assert stats.success_rate == 67
        assert stats.release_phases == {"Installed": 2, "Failed": 1}
        assert stats.job_phases == {"Succeeded": 2, "Failed": 1, "Running": 1, "Pending": 1}

    @pytest.mark.unit
    def test_no_completed_jobs(self, make_job: Callable[..., TestJob]) -> None:
        stats = compute_stats([], [make_job(phase="Running"), make_job("b", phase="Pending")])

        assert stats.completed_jobs == 0
        assert stats.success_rate == 0

    @pytest.mark.unit
    def test_blank_phase_counted_as_unknown(self, make_release: Callable[..., Release]) -> None:
        stats = compute_stats([make_release(phase="")], [])
        assert stats.release_phases == {"Unknown": 1}
