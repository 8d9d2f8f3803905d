"""
Shared plumbing for the resource services.
"""

from __future__ import annotations

from typing import Any, Optional

from ..core.errors import OakError, SDKError
from ..core.result import Err, Result, err

__all__ = ["error_body_message", "wrap_failure"]


def error_body_message(error: Any) -> Optional[str]:
    """Return the API's ``msg`` field from an :class:`ApiError` body, if any."""
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        message = body.get("msg")
        if isinstance(message, str):
            return message
    return None


def wrap_failure(result: Result[Any, OakError], message: str) -> Result[Any, OakError]:
    """
    Re-label a failed transport result as an :class:`SDKError`.

    The original error is kept as ``cause``; successes pass through.
    """
    if isinstance(result, Err):
        return err(SDKError(message, result.error))
    return result
