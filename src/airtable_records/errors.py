"""
Exception hierarchy for the Airtable records client.

- SetupError: client not configured, raised before any network call
- TransportError: network / IO failure talking to the API
- RequestError: the API answered with an error envelope (raw bytes kept)
- DecodeError: body is not JSON or not the expected envelope shape
- CoercionError: a column value does not match its declared kind
- UnsupportedKindError: a record shape declares a kind the mapper cannot fill
"""
from __future__ import annotations
from typing import Any, Optional


class AirtableError(Exception):
    """Base class for everything this package raises on purpose."""


class SetupError(AirtableError):
    pass


class TransportError(AirtableError):
    pass


class RequestError(AirtableError):
    def __init__(
        self,
        message: str,
        error_type: str = "",
        raw: bytes = b"",
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.raw = raw
        self.status_code = status_code

    def __str__(self) -> str:
        if self.error_type and self.error_type != self.message:
            return f"{self.error_type}: {self.message}"
        return self.message


class DecodeError(AirtableError):
    pass


class CoercionError(AirtableError):
    def __init__(self, field: str, expected: str, value: Any):
        super().__init__(f"could not parse column '{field}' as {expected} (got {type(value).__name__})")
        self.field = field
        self.expected = expected
        self.value = value


class UnsupportedKindError(AirtableError, TypeError):
    def __init__(self, field: str, annotation: Any):
        super().__init__(f"unsupported field kind for '{field}': {annotation!r}")
        self.field = field
        self.annotation = annotation
