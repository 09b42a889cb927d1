"""Steer custom resource models."""

from steer_dashboard.integrations.steer.models.base import (
    API_VERSION,
    CleanupSpec,
    ObjectMeta,
    ResourceKind,
    SteerModel,
    SteerResource,
    parse_timestamp,
)
from steer_dashboard.integrations.steer.models.release import (
    ChartSpec,
    DeploymentSpec,
    GitSource,
    Release,
    ReleaseSpec,
    ReleaseStatus,
)
from steer_dashboard.integrations.steer.models.test_job import (
    HOOK_TYPES,
    SCHEDULE_TYPES,
    CronSchedule,
    EnvVar,
    EnvVarSource,
    FieldRef,
    Hook,
    HookResult,
    HooksSpec,
    KubernetesHook,
    OnceSchedule,
    ReleaseRef,
    Schedule,
    ScriptHook,
    TestJob,
    TestJobSpec,
    TestJobStatus,
    TestResult,
    TestSpec,
)

__all__ = [
    "API_VERSION",
    "HOOK_TYPES",
    "SCHEDULE_TYPES",
    "ChartSpec",
    "CleanupSpec",
    "CronSchedule",
    "DeploymentSpec",
    "EnvVar",
    "EnvVarSource",
    "FieldRef",
    "GitSource",
    "Hook",
    "HookResult",
    "HooksSpec",
    "KubernetesHook",
    "ObjectMeta",
    "OnceSchedule",
    "Release",
    "ReleaseRef",
    "ReleaseSpec",
    "ReleaseStatus",
    "ResourceKind",
    "Schedule",
    "ScriptHook",
    "SteerModel",
    "SteerResource",
    "TestJob",
    "TestJobSpec",
    "TestJobStatus",
    "TestResult",
    "TestSpec",
    "parse_timestamp",
]
