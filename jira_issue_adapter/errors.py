"""Exceptions raised by the Jira adapter."""

from concurrent.futures import Future
from typing import Any


class JiraAdapterError(Exception):
    """Base class for errors raised by this package."""


class MissingFieldsError(JiraAdapterError, KeyError):
    """Raised when a raw issue payload has no usable ``fields`` mapping."""

    def __init__(
        self, payload_keys: list[str] | None = None, found_type: str | None = None
    ):
        self.payload_keys = payload_keys or []
        self.found_type = found_type
        if found_type is None:
            self.message = (
                f"Issue payload has no 'fields' entry (keys: {self.payload_keys})"
            )
        else:
            self.message = (
                f"Issue payload 'fields' entry is not a mapping (got {found_type})"
            )
        super().__init__(self.message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class AttemptTimeout(TimeoutError):
    """A single attempt did not finish before its deadline.

    ``pending`` is the future of the abandoned attempt, when there is one.
    """

    def __init__(self, timeout: float, pending: "Future[Any] | None" = None):
        self.timeout = timeout
        self.pending = pending
        self.message = f"Operation did not complete within {timeout} seconds"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class TimeoutExceeded(JiraAdapterError, TimeoutError):
    """Every attempt allowed by the retry budget timed out."""

    def __init__(self, attempts: int, timeout: float):
        self.attempts = attempts
        self.timeout = timeout
        self.message = (
            f"Gave up after {attempts} attempts (each limited to {timeout} seconds)"
        )
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
