"""Local validation errors raised before anything reaches the backend."""

from __future__ import annotations


class SteerValidationError(Exception):
    """Base exception for client-side validation failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FormValidationError(SteerValidationError):
    """A form value fails a required-field or shape rule.

    Attributes:
        field: Name of the offending form field, shown next to the input.
        message: Human-readable reason.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class MalformedSelectionKeyError(FormValidationError):
    """A release selection key is not ``namespace/name``."""

    def __init__(self, key: str, field: str = "release") -> None:
        super().__init__(field, f"'{key}' is not a valid release key (expected namespace/name)")
        self.key = key
