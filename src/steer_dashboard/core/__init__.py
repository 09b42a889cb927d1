"""Dashboard core: phase tones, reference resolution, stats, forms and refresh."""

from steer_dashboard.core.exceptions import (
    FormValidationError,
    MalformedSelectionKeyError,
    SteerValidationError,
)
from steer_dashboard.core.forms import (
    RELEASE_FORM_FIELDS,
    TEST_JOB_FORM_FIELDS,
    FieldSpec,
    build_release,
    build_test_job,
)
from steer_dashboard.core.phases import Tone, classify, classify_release, classify_test_job
from steer_dashboard.core.references import (
    describe_reference,
    parse_selection_key,
    resolve_release,
    selection_options,
)
from steer_dashboard.core.refresh import RefreshController, RefreshState, Snapshot
from steer_dashboard.core.stats import DashboardStats, compute_stats, success_rate

__all__ = [
    "RELEASE_FORM_FIELDS",
    "TEST_JOB_FORM_FIELDS",
    "DashboardStats",
    "FieldSpec",
    "FormValidationError",
    "MalformedSelectionKeyError",
    "RefreshController",
    "RefreshState",
    "Snapshot",
    "SteerValidationError",
    "Tone",
    "build_release",
    "build_test_job",
    "classify",
    "classify_release",
    "classify_test_job",
    "compute_stats",
    "describe_reference",
    "parse_selection_key",
    "resolve_release",
    "selection_options",
    "success_rate",
]
