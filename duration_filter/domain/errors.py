"""Exception hierarchy for timestamp resolution and duration computation.

Setup-time errors (``ConfigurationError`` and ``UnsupportedFormat``) abort
filter construction. Per-event errors (``MissingField`` and
``UnresolvableTimestamp``) are caught at the filter boundary. A
``MalformedTimestamp`` never leaves the resolver unless every format failed.
"""

from __future__ import annotations

from typing import Optional


class DurationFilterError(Exception):
    """Base exception for the duration filter.

    Provides dual messaging: a short user-facing message and internal details
    for logging.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Optional[Exception] = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class ConfigurationError(DurationFilterError):
    """Raised when field or format declarations are malformed or incomplete."""


class UnsupportedFormat(ConfigurationError):
    """Raised when a format token cannot be compiled into a parser."""

    def __init__(
        self,
        token: str,
        internal_details: str = "",
        wrapped: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            f"unsupported timestamp format: {token!r}", internal_details, wrapped
        )
        self.token = token


class MalformedTimestamp(DurationFilterError):
    """Raised when a raw value does not match the format that was tried."""

    def __init__(
        self,
        value: object,
        token: str,
        internal_details: str = "",
        wrapped: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            f"timestamp {value!r} does not match format {token!r}",
            internal_details,
            wrapped,
        )
        self.value = value
        self.token = token


class MissingField(DurationFilterError):
    """Raised when a declared timestamp field is absent from an event."""

    def __init__(self, field: str) -> None:
        super().__init__(f"field {field!r} is missing from the event")
        self.field = field


class UnresolvableTimestamp(DurationFilterError):
    """Raised when no declared format could parse a field's value.

    ``wrapped`` holds the last individual failure only.
    """

    def __init__(
        self,
        field: str,
        value: object,
        wrapped: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            f"could not resolve timestamp in field {field!r}",
            str(wrapped) if wrapped is not None else "",
            wrapped,
        )
        self.field = field
        self.value = value
