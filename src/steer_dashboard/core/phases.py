"""Phase classification.

Maps backend-reported phase strings to a display tone. Phases are open
strings; anything unrecognised, including empty or missing values, is
``primary``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from steer_dashboard.integrations.steer.models import ResourceKind

if TYPE_CHECKING:
    from steer_dashboard.integrations.steer.models import Release, TestJob


class Tone(str, Enum):
    """Semantic display category of a phase."""

    PRIMARY = "primary"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


RELEASE_PHASE_TONES: dict[str, Tone] = {
    "Installed": Tone.SUCCESS,
    "Failed": Tone.DANGER,
    "Installing": Tone.WARNING,
}

TEST_JOB_PHASE_TONES: dict[str, Tone] = {
    "Succeeded": Tone.SUCCESS,
    "Failed": Tone.DANGER,
    "Running": Tone.WARNING,
}

_TONE_TABLES: dict[ResourceKind, dict[str, Tone]] = {
    ResourceKind.RELEASE: RELEASE_PHASE_TONES,
    ResourceKind.TEST_JOB: TEST_JOB_PHASE_TONES,
}

SUCCEEDED = "Succeeded"
FAILED = "Failed"


def classify(kind: ResourceKind, phase: str | None) -> Tone:
    """Return the tone of a phase for the given resource kind."""
    if not phase:
        return Tone.PRIMARY
    return _TONE_TABLES[kind].get(phase, Tone.PRIMARY)


def classify_release(release: Release) -> Tone:
    return classify(ResourceKind.RELEASE, release.status.phase)


def classify_test_job(job: TestJob) -> Tone:
    return classify(ResourceKind.TEST_JOB, job.status.phase)


def classify_result(phase: str | None) -> Tone:
    """Tone of a per-test or per-hook result, which share the job phases."""
    return classify(ResourceKind.TEST_JOB, phase)


def is_succeeded(job: TestJob) -> bool:
    return job.status.phase == SUCCEEDED


def is_failed(job: TestJob) -> bool:
    return job.status.phase == FAILED
