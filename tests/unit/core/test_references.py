"""Unit tests for release reference resolution."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from steer_dashboard.core.exceptions import FormValidationError, MalformedSelectionKeyError
from steer_dashboard.core.references import (
    describe_reference,
    parse_selection_key,
    release_key,
    resolve_release,
    selection_options,
)
from steer_dashboard.integrations.steer.models import Release, ReleaseRef


@pytest.fixture
def releases(make_release: Callable[..., Release]) -> list[Release]:
    return [
        make_release("web", "default"),
        make_release("web", "staging"),
        make_release("api", "default"),
    ]


class TestResolveRelease:
    """Tests for resolve_release."""

    @pytest.mark.unit
    def test_exact_match(self, releases: list[Release]) -> None:
        found = resolve_release(ReleaseRef(namespace="staging", name="web"), releases)
        assert found is releases[1]

    @pytest.mark.unit
    def test_namespace_must_match(self, releases: list[Release]) -> None:
        assert resolve_release(ReleaseRef(namespace="prod", name="web"), releases) is None

    @pytest.mark.unit
    def test_empty_snapshot(self) -> None:
        assert resolve_release(ReleaseRef(namespace="default", name="web"), []) is None


class TestSelectionKeys:
    """Tests for selection key helpers."""

    @pytest.mark.unit
    def test_release_key(self, releases: list[Release]) -> None:
        assert release_key(releases[1]) == "staging/web"

    @pytest.mark.unit
    def test_options_in_snapshot_order(self, releases: list[Release]) -> None:
        assert selection_options(releases) == [
            ("default/web", "default/web"),
            ("staging/web", "staging/web"),
            ("default/api", "default/api"),
        ]

    @pytest.mark.unit
    def test_parse(self) -> None:
        ref = parse_selection_key("default/web")

        assert ref == ReleaseRef(namespace="default", name="web")
        assert ref.key == "default/web"

    @pytest.mark.unit
    def test_parse_round_trips_release_key(self, releases: list[Release]) -> None:
        ref = parse_selection_key(release_key(releases[1]))
        assert resolve_release(ref, releases) is releases[1]

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["", "web", "a/b/c", "/web", "default/", " / "])
    def test_malformed(self, key: str) -> None:
        with pytest.raises(MalformedSelectionKeyError) as exc_info:
            parse_selection_key(key)

        assert isinstance(exc_info.value, FormValidationError)
        assert exc_info.value.field == "release"
        assert exc_info.value.key == key


class TestDescribeReference:
    """Tests for describe_reference."""

    @pytest.mark.unit
    def test_found(self, releases: list[Release]) -> None:
        ref = ReleaseRef(namespace="default", name="api")
        assert describe_reference(ref, releases) == "default/api"

    @pytest.mark.unit
    def test_dangling(self, releases: list[Release]) -> None:
        ref = ReleaseRef(namespace="prod", name="api")
        assert describe_reference(ref, releases) == "prod/api (not found)"
