"""Display helpers shared by the TUI and the CLI.

Produces Rich markup, which both Textual widgets and Rich tables render.
Values read from the backend are escaped before they reach markup, so
brackets in names or messages render literally.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from rich.markup import escape

from steer_dashboard.core.phases import Tone, classify_release, classify_test_job
from steer_dashboard.core.references import describe_reference, resolve_release
from steer_dashboard.integrations.steer.models import Release, TestJob

TONE_COLORS: dict[Tone, str] = {
    Tone.PRIMARY: "cyan",
    Tone.SUCCESS: "green",
    Tone.WARNING: "yellow",
    Tone.DANGER: "red",
}

EMPTY = "-"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

RELEASE_COLUMNS = ["Name", "Namespace", "Chart", "Status", "Deployed At"]
TEST_JOB_COLUMNS = ["Name", "Namespace", "Target Release", "Schedule", "Status"]


def toned(text: str, tone: Tone) -> str:
    color = TONE_COLORS[tone]
    return f"[{color}]{escape(text)}[/{color}]"


def phase_markup(phase: str | None, tone: Tone) -> str:
    """Render a phase in its tone colour; a blank phase shows as a dash."""
    return toned(phase or EMPTY, tone)


def or_dash(value: str | None) -> str:
    return escape(value) if value else EMPTY


def format_timestamp(value: datetime | None) -> str:
    return value.strftime(TIMESTAMP_FORMAT) if value else EMPTY


def release_row(release: Release) -> tuple[str, ...]:
    """Row matching ``RELEASE_COLUMNS``."""
    return (
        escape(release.name),
        escape(release.namespace),
        escape(release.spec.chart.label),
        phase_markup(release.status.phase, classify_release(release)),
        format_timestamp(release.status.deployed_at_time),
    )


def job_row(job: TestJob, releases: Sequence[Release]) -> tuple[str, ...]:
    """Row matching ``TEST_JOB_COLUMNS``.

    The target release column falls back to the raw reference, marked as
    not found, when the release is missing from the snapshot.
    """
    return (
        escape(job.name),
        escape(job.namespace),
        escape(describe_reference(job.release_ref, releases)),
        escape(job.spec.schedule.describe()),
        phase_markup(job.status.phase, classify_test_job(job)),
    )


def release_fields(release: Release) -> list[tuple[str, str]]:
    """``(label, value)`` pairs describing one release."""
    chart = release.spec.chart
    deployment = release.spec.deployment
    fields = [
        ("Name", escape(release.name)),
        ("Namespace", escape(release.namespace)),
        ("Chart", escape(chart.label)),
        ("Source", or_dash(chart.source)),
    ]
    if chart.repository:
        fields.append(("Repository", escape(chart.repository)))
    if chart.git is not None:
        fields.append(("Git", escape(chart.git.url)))
        for label, value in (("Git Ref", chart.git.ref), ("Git Path", chart.git.path), ("Git Branch", chart.git.branch)):
            if value:
                fields.append((label, escape(value)))
    fields.extend(
        [
            ("Target Namespace", or_dash(deployment.namespace)),
            ("Timeout", or_dash(deployment.timeout)),
            ("Status", phase_markup(release.status.phase, classify_release(release))),
            ("Message", or_dash(release.status.message)),
            ("Deployed At", format_timestamp(release.status.deployed_at_time)),
        ]
    )
    return fields


def job_fields(job: TestJob, releases: Sequence[Release]) -> list[tuple[str, str]]:
    """``(label, value)`` pairs describing one test job."""
    target = escape(describe_reference(job.release_ref, releases))
    release = resolve_release(job.release_ref, releases)
    if release is not None:
        target += f" {phase_markup(release.status.phase, classify_release(release))}"
    test = job.spec.test
    status = job.status
    fields = [
        ("Name", escape(job.name)),
        ("Namespace", escape(job.namespace)),
        ("Target Release", target),
        ("Schedule", escape(job.spec.schedule.describe())),
        ("Test Timeout", or_dash(test.timeout)),
        ("Capture Logs", "yes" if test.logs else "no"),
    ]
    if test.filter:
        fields.append(("Filter", escape(test.filter)))
    fields.extend(
        [
            ("Status", phase_markup(status.phase, classify_test_job(job))),
            ("Message", or_dash(status.message)),
            ("Started", format_timestamp(status.start_time_value)),
            ("Completed", format_timestamp(status.completion_time_value)),
            ("Tests", str(len(status.test_results))),
            ("Hooks", str(len(status.hook_results))),
        ]
    )
    return fields
