"""Unit tests for Steer exceptions."""

from __future__ import annotations

import httpx
import pytest

from steer_dashboard.integrations.steer.exceptions import (
    SteerAPIError,
    SteerConnectionError,
    SteerDecodeError,
)


class TestSteerAPIError:
    """Tests for SteerAPIError."""

    @pytest.mark.unit
    def test_attributes(self) -> None:
        error = SteerAPIError(
            "not found",
            status_code=404,
            response_body={"error": "not found"},
            endpoint="/helmreleases/default/web",
        )

        assert error.message == "not found"
        assert error.status_code == 404
        assert error.response_body == {"error": "not found"}
        assert error.endpoint == "/helmreleases/default/web"

    @pytest.mark.unit
    def test_str_includes_status_and_endpoint(self) -> None:
        error = SteerAPIError("boom", status_code=500, endpoint="/helmtestjobs")
        assert str(error) == "boom (status: 500) [endpoint: /helmtestjobs]"

    @pytest.mark.unit
    def test_str_message_only(self) -> None:
        assert str(SteerAPIError("boom")) == "boom"


class TestSubclasses:
    """Tests for the connection and decode errors."""

    @pytest.mark.unit
    def test_connection_error(self) -> None:
        cause = httpx.ConnectError("refused")
        error = SteerConnectionError(endpoint="/helmreleases", original_error=cause)

        assert isinstance(error, SteerAPIError)
        assert error.message == "Failed to connect to Steer API"
        assert error.original_error is cause
        assert error.status_code is None

    @pytest.mark.unit
    def test_decode_error(self) -> None:
        error = SteerDecodeError(status_code=200, endpoint="/helmreleases")

        assert isinstance(error, SteerAPIError)
        assert error.message == "Unexpected response from Steer API"
        assert error.status_code == 200
