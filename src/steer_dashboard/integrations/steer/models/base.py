"""Base models shared by the Steer custom resources.

Documents travel as camelCase JSON. Models use snake_case attributes with a
camelCase alias generator, so both spellings are accepted on input and
``to_document()`` produces what the backend expects.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

API_VERSION = "steer.io/v1alpha1"

# Go zero time, emitted for unset non-pointer timestamps
_ZERO_TIME_PREFIX = "0001-01-01"


class ResourceKind(str, Enum):
    """The two resource kinds served under ``/api/v1``.

    The value is the URL collection segment.
    """

    RELEASE = "helmreleases"
    TEST_JOB = "helmtestjobs"

    @property
    def kind_name(self) -> str:
        """The ``kind`` literal of documents of this kind."""
        return _KIND_NAMES[self]

    @property
    def display_name(self) -> str:
        """Human-readable plural used in notifications."""
        return _DISPLAY_NAMES[self]


_KIND_NAMES: dict[ResourceKind, str] = {
    ResourceKind.RELEASE: "HelmRelease",
    ResourceKind.TEST_JOB: "HelmTestJob",
}

_DISPLAY_NAMES: dict[ResourceKind, str] = {
    ResourceKind.RELEASE: "releases",
    ResourceKind.TEST_JOB: "test jobs",
}


class SteerModel(BaseModel):
    """Base class for every Steer document fragment."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ObjectMeta(SteerModel):
    """Resource identity and labels."""

    name: str = Field(default="", description="Resource name")
    namespace: str = Field(default="", description="Resource namespace")
    labels: dict[str, str] | None = Field(default=None, description="Resource labels")


class CleanupSpec(SteerModel):
    """What to remove together with the resource."""

    delete_namespace: bool | None = Field(default=None, description="Delete the target namespace")
    delete_images: bool | None = Field(default=None, description="Delete pulled images")


class SteerResource(SteerModel):
    """Common envelope of HelmRelease and HelmTestJob documents."""

    resource_kind: ClassVar[ResourceKind]

    api_version: str = Field(default=API_VERSION, description="API group and version")
    kind: str = Field(default="", description="Resource kind literal")
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    @property
    def name(self) -> str:
        """Resource name."""
        return self.metadata.name

    @property
    def namespace(self) -> str:
        """Resource namespace."""
        return self.metadata.namespace

    @property
    def key(self) -> str:
        """Identity as ``namespace/name``."""
        return f"{self.metadata.namespace}/{self.metadata.name}"

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def default_status(cls, v: Any) -> Any:
        """Backends may send ``status: null`` for fresh resources."""
        return {} if v is None else v

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Self:
        """Create from a JSON document returned by the backend."""
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Serialize to a camelCase JSON document.

        Fields that are ``None`` are left out, so an absent field and an
        empty string remain distinguishable.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp, treating empty and zero times as unset."""
    if not value or value.startswith(_ZERO_TIME_PREFIX):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
