"""Resolution of test job references against a release snapshot.

A job's ``helmReleaseRef`` is not validated by the backend when the job is
listed, so it may point at a release that does not exist (yet, or any
more). Resolution returns None in that case and views fall back to showing
the reference itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from steer_dashboard.core.exceptions import MalformedSelectionKeyError
from steer_dashboard.integrations.steer.models import Release, ReleaseRef

KEY_SEPARATOR = "/"
NOT_FOUND_SUFFIX = " (not found)"


def release_key(release: Release) -> str:
    """Selection key of a release, ``namespace/name``."""
    return f"{release.namespace}{KEY_SEPARATOR}{release.name}"


def resolve_release(ref: ReleaseRef, releases: Iterable[Release]) -> Release | None:
    """Find the release a reference points at.

    Args:
        ref: The job's release reference.
        releases: Snapshot of fetched releases.

    Returns:
        The release with exactly matching namespace and name, or None.
    """
    for release in releases:
        if release.namespace == ref.namespace and release.name == ref.name:
            return release
    return None


def parse_selection_key(key: str, field: str = "release") -> ReleaseRef:
    """Split a ``namespace/name`` selection key into a reference.

    Raises:
        MalformedSelectionKeyError: Unless the key has exactly two non-empty
            segments.
    """
    parts = (key or "").strip().split(KEY_SEPARATOR)
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise MalformedSelectionKeyError(key, field=field)
    namespace, name = (part.strip() for part in parts)
    return ReleaseRef(namespace=namespace, name=name)


def selection_options(releases: Sequence[Release]) -> list[tuple[str, str]]:
    """``(label, key)`` pairs for a release picker, in snapshot order."""
    return [(release_key(r), release_key(r)) for r in releases]


def describe_reference(ref: ReleaseRef, releases: Iterable[Release]) -> str:
    """Display text for a job's target release."""
    if resolve_release(ref, releases) is None:
        return f"{ref.key}{NOT_FOUND_SUFFIX}"
    return ref.key
