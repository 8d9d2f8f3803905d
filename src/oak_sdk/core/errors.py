"""
Error taxonomy shared by the transport, the retry engine and the services.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

__all__ = [
    "AbortError",
    "ApiError",
    "EnvironmentViolationError",
    "NetworkError",
    "OakError",
    "ParseError",
    "SDKError",
]


class OakError(Exception):
    """Base class for every error surfaced by the SDK."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class SDKError(OakError):
    """Catch-all wrapper for failures that have no more specific type."""


class ApiError(OakError):
    """A non-2xx response was received from the API."""

    def __init__(
        self,
        message: str,
        status: int,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause)
        self.status = status
        self.body = body
        self.headers = headers

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


class NetworkError(OakError):
    """No response was received (DNS, refused connection, TLS, timeout)."""

    is_network_error = True


class ParseError(OakError):
    """A response body could not be decoded."""


class AbortError(OakError):
    """The caller cancelled a retry loop through its signal."""


class EnvironmentViolationError(SDKError):
    """A sandbox-only operation was invoked against production."""

    def __init__(self, method_name: str, environment: str) -> None:
        super().__init__(
            f'Method "{method_name}" is only available in sandbox environment. '
            f"Current environment: {environment}. "
            "This method cannot be called in production to prevent accidental "
            "data corruption."
        )
        self.method_name = method_name
        self.environment = environment
