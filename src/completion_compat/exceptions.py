"""Exceptions raised by the completion compatibility adapter."""

from typing import Any, Optional


class CompatError(Exception):
    """Base class for errors raised intentionally by this package."""


class BackendError(CompatError):
    """Raised when a call to the Responses backend fails.

    The adapter never retries; callers decide what to do with the failure.
    """


class BackendStatusError(BackendError):
    """Raised when the backend answers with a non-2xx status.

    The status code and decoded body are kept so backend validation
    failures reach the caller unchanged.
    """

    def __init__(self, message: str = "", status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BackendConnectionError(BackendError):
    """Raised when the backend cannot be reached (timeouts, DNS, resets)."""
