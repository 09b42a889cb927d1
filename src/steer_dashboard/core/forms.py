"""Form builders for new HelmRelease and HelmTestJob resources.

Each builder turns a flat mapping of form values into a complete resource
document: identity literals, nested spec, defaults for empty fields and an
optimistic ``Pending`` status that the backend is free to override.
Violations raise ``FormValidationError`` naming the offending field.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
import yaml

from steer_dashboard.core.exceptions import FormValidationError
from steer_dashboard.core.references import parse_selection_key
from steer_dashboard.integrations.steer.models import (
    API_VERSION,
    SCHEDULE_TYPES,
    ChartSpec,
    CleanupSpec,
    CronSchedule,
    DeploymentSpec,
    GitSource,
    ObjectMeta,
    OnceSchedule,
    Release,
    ReleaseSpec,
    ReleaseStatus,
    TestJob,
    TestJobSpec,
    TestJobStatus,
    TestSpec,
)

logger = structlog.get_logger()

DEFAULT_NAMESPACE = "default"
INITIAL_PHASE = "Pending"
DEFAULT_SCHEDULE_TYPE = "once"
DEFAULT_TEST_TIMEOUT = "10m"

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "n", "0", "off", ""})


# ---------------------------------------------------------------------------
# Form field descriptors
# ---------------------------------------------------------------------------


@dataclass
class FieldSpec:
    """Describes a single form field."""

    name: str
    label: str
    field_type: str = "text"  # text | int | select | textarea
    required: bool = False
    default: str = ""
    options: list[tuple[str, str]] | None = None  # (label, value) for selects
    placeholder: str = ""
    help_text: str = ""


_YES_NO = [("No", "false"), ("Yes", "true")]

RELEASE_FORM_FIELDS: list[FieldSpec] = [
    FieldSpec("name", "Name", required=True, placeholder="Release name"),
    FieldSpec("namespace", "Namespace", placeholder=DEFAULT_NAMESPACE),
    FieldSpec("chart_name", "Chart Name", required=True, placeholder="nginx"),
    FieldSpec("version", "Version", placeholder="latest"),
    FieldSpec("repository", "Repository", placeholder="https://charts.bitnami.com/bitnami"),
    FieldSpec(
        "git_url",
        "Git URL",
        placeholder="https://github.com/org/charts.git",
        help_text="Use instead of a repository to install from git",
    ),
    FieldSpec("git_ref", "Git Ref", placeholder="v1.2.0"),
    FieldSpec("git_path", "Git Path", placeholder="charts/app"),
    FieldSpec("git_branch", "Git Branch", placeholder="main"),
    FieldSpec("target_namespace", "Target NS", required=True, placeholder="Deployment namespace"),
    FieldSpec("timeout", "Timeout", placeholder="5m"),
    FieldSpec("max_retries", "Max Retries", field_type="int", placeholder="3"),
    FieldSpec(
        "values",
        "Values (YAML)",
        field_type="textarea",
        placeholder="replicaCount: 2",
        help_text="Chart value overrides, passed to the backend unchanged",
    ),
    FieldSpec("delete_namespace", "Delete NS", field_type="select", default="false", options=_YES_NO),
    FieldSpec("delete_images", "Delete Images", field_type="select", default="false", options=_YES_NO),
]

TEST_JOB_FORM_FIELDS: list[FieldSpec] = [
    FieldSpec("name", "Name", required=True, placeholder="Job name"),
    FieldSpec("namespace", "Namespace", placeholder=DEFAULT_NAMESPACE),
    FieldSpec(
        "release",
        "Target Release",
        field_type="select",
        required=True,
        help_text="Filled from the current release list",
    ),
    FieldSpec(
        "schedule_type",
        "Schedule Type",
        field_type="select",
        default=DEFAULT_SCHEDULE_TYPE,
        options=[("Once", "once"), ("Cron", "cron")],
    ),
    FieldSpec(
        "delay",
        "Delay",
        placeholder="e.g. 5m",
        help_text="Delay execution (e.g. 5m, 1h). Only for 'once' type.",
    ),
    FieldSpec(
        "cron",
        "Cron Expression",
        placeholder="e.g. 0 2 * * *",
        help_text="Standard cron expression. Only for 'cron' type.",
    ),
    FieldSpec("timezone", "Timezone", placeholder="UTC", help_text="Only for 'cron' type."),
    FieldSpec("test_timeout", "Test Timeout", default=DEFAULT_TEST_TIMEOUT),
    FieldSpec("logs", "Capture Logs", field_type="select", default="true", options=_YES_NO),
    FieldSpec("filter", "Test Filter", placeholder="Only run tests matching this name"),
]


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _text(values: Mapping[str, Any], key: str) -> str:
    raw = values.get(key)
    return "" if raw is None else str(raw).strip()


def _optional(values: Mapping[str, Any], key: str) -> str | None:
    return _text(values, key) or None


def _required(values: Mapping[str, Any], key: str, label: str) -> str:
    value = _text(values, key)
    if not value:
        raise FormValidationError(key, f"{label} is required")
    return value


def _parse_bool(values: Mapping[str, Any], key: str) -> bool | None:
    """Parse a yes/no field; None when the field was not submitted."""
    raw = values.get(key)
    if raw is None:
        return None
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise FormValidationError(key, f"'{raw}' is not a yes/no value")


def _parse_int(values: Mapping[str, Any], key: str, label: str) -> int | None:
    raw = values.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        number = int(raw)
    except (TypeError, ValueError):
        raise FormValidationError(key, f"{label} must be a number") from None
    if number < 0:
        raise FormValidationError(key, f"{label} must not be negative")
    return number


def parse_values(raw: Any, field: str = "values") -> dict[str, Any] | None:
    """Parse chart value overrides.

    Accepts a mapping or YAML text describing one. Contents are opaque and
    kept as-is.
    """
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return dict(raw) or None
    text = str(raw).strip()
    if not text:
        return None
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FormValidationError(field, f"Invalid YAML: {e}") from e
    if loaded is None:
        return None
    if not isinstance(loaded, dict):
        raise FormValidationError(field, "Values must be a YAML mapping")
    return loaded


def _cleanup(values: Mapping[str, Any]) -> CleanupSpec | None:
    delete_namespace = _parse_bool(values, "delete_namespace")
    delete_images = _parse_bool(values, "delete_images")
    if not delete_namespace and not delete_images:
        return None
    return CleanupSpec(
        delete_namespace=delete_namespace or None,
        delete_images=delete_images or None,
    )


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _chart(values: Mapping[str, Any]) -> ChartSpec:
    repository = _optional(values, "repository")
    git_url = _optional(values, "git_url")
    git_fields = {key: _optional(values, key) for key in ("git_ref", "git_path", "git_branch")}

    if repository and git_url:
        raise FormValidationError("git_url", "Set either a repository or a git URL, not both")
    if not git_url and any(git_fields.values()):
        raise FormValidationError("git_url", "Git URL is required when ref, path or branch is set")

    git = None
    if git_url:
        git = GitSource(
            url=git_url,
            ref=git_fields["git_ref"],
            path=git_fields["git_path"],
            branch=git_fields["git_branch"],
        )

    return ChartSpec(
        name=_required(values, "chart_name", "Chart name"),
        version=_optional(values, "version"),
        repository=repository,
        git=git,
    )


def build_release(values: Mapping[str, Any]) -> Release:
    """Build a HelmRelease from form values.

    Args:
        values: Form values keyed by ``RELEASE_FORM_FIELDS`` names.

    Returns:
        A release ready to be submitted.

    Raises:
        FormValidationError: If a required field is missing or malformed.
    """
    name = _required(values, "name", "Name")
    release = Release(
        api_version=API_VERSION,
        metadata=ObjectMeta(name=name, namespace=_text(values, "namespace") or DEFAULT_NAMESPACE),
        spec=ReleaseSpec(
            chart=_chart(values),
            values=parse_values(values.get("values")),
            deployment=DeploymentSpec(
                namespace=_required(values, "target_namespace", "Target namespace"),
                timeout=_optional(values, "timeout"),
                max_retries=_parse_int(values, "max_retries", "Max retries"),
                wait_after_deployment=_optional(values, "wait_after_deployment"),
                auto_uninstall_after=_optional(values, "auto_uninstall_after"),
            ),
            cleanup=_cleanup(values),
        ),
        status=ReleaseStatus(phase=INITIAL_PHASE),
    )
    logger.debug("Built release from form", release=release.key)
    return release


def build_test_job(values: Mapping[str, Any]) -> TestJob:
    """Build a HelmTestJob from form values.

    Only the fields of the chosen schedule branch are carried: a ``cron``
    job has no ``delay`` key and a ``once`` job has no ``cron`` key. A
    ``once`` job always carries ``delay``, empty when left blank.

    Args:
        values: Form values keyed by ``TEST_JOB_FORM_FIELDS`` names.

    Returns:
        A test job ready to be submitted.

    Raises:
        FormValidationError: If a required field is missing or malformed,
            including a release key that is not ``namespace/name``.
    """
    name = _required(values, "name", "Name")
    ref = parse_selection_key(_required(values, "release", "Target release"))

    schedule_type = _text(values, "schedule_type") or DEFAULT_SCHEDULE_TYPE
    if schedule_type not in SCHEDULE_TYPES:
        raise FormValidationError(
            "schedule_type",
            f"Schedule type must be one of: {', '.join(SCHEDULE_TYPES)}",
        )

    schedule: OnceSchedule | CronSchedule
    if schedule_type == "cron":
        schedule = CronSchedule(
            cron=_required(values, "cron", "Cron expression"),
            timezone=_optional(values, "timezone"),
        )
    else:
        schedule = OnceSchedule(delay=_text(values, "delay"))

    logs = _parse_bool(values, "logs")
    job = TestJob(
        api_version=API_VERSION,
        metadata=ObjectMeta(name=name, namespace=_text(values, "namespace") or DEFAULT_NAMESPACE),
        spec=TestJobSpec(
            helm_release_ref=ref,
            schedule=schedule,
            test=TestSpec(
                timeout=_text(values, "test_timeout") or DEFAULT_TEST_TIMEOUT,
                logs=True if logs is None else logs,
                filter=_optional(values, "filter"),
            ),
            cleanup=_cleanup(values),
        ),
        status=TestJobStatus(phase=INITIAL_PHASE),
    )
    logger.debug("Built test job from form", job=job.key, schedule=schedule_type)
    return job
