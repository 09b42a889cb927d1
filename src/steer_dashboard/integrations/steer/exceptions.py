"""Steer API transport exceptions."""

from __future__ import annotations

from typing import Any


class SteerAPIError(Exception):
    """Base exception for every failed call to the Steer API.

    Non-2xx responses are all reported with this class regardless of the
    status code; callers must not special-case 404 vs 500.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (None when no response was received).
        response_body: Parsed response body, if any.
        endpoint: The API endpoint that was called.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict[str, Any] | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialize SteerAPIError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from the backend.
            response_body: Parsed response body from the backend.
            endpoint: The API endpoint that was called.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.endpoint = endpoint

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.endpoint:
            parts.append(f"[endpoint: {self.endpoint}]")
        return " ".join(parts)


class SteerConnectionError(SteerAPIError):
    """The backend could not be reached (network error, DNS, timeout)."""

    def __init__(
        self,
        message: str = "Failed to connect to Steer API",
        endpoint: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize SteerConnectionError.

        Args:
            message: Human-readable error message.
            endpoint: The API endpoint that was attempted.
            original_error: The underlying transport exception.
        """
        super().__init__(message=message, endpoint=endpoint)
        self.original_error = original_error


class SteerDecodeError(SteerAPIError):
    """A 2xx response body could not be decoded into the expected shape."""

    def __init__(
        self,
        message: str = "Unexpected response from Steer API",
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message=message, status_code=status_code, endpoint=endpoint)
