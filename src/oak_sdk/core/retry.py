"""
Exponential backoff with jitter around any awaitable operation.

All durations in :class:`RetryOptions` are milliseconds. The engine converts
to seconds only when it hands the wait to ``sleep``.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, FrozenSet, Mapping, Optional, Protocol, TypeVar

from .errors import AbortError, SDKError

__all__ = [
    "DEFAULT_RETRY_OPTIONS",
    "RetryOptions",
    "RetrySignal",
    "is_network_error",
    "with_retry",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_STATUS: FrozenSet[int] = frozenset({408, 429, 500, 502, 503, 504})


class RetrySignal(Protocol):
    """Anything exposing ``is_set()``; :class:`asyncio.Event` is the usual one."""

    def is_set(self) -> bool:
        ...


def is_network_error(error: Any) -> bool:
    return bool(getattr(error, "is_network_error", False))


@dataclass(frozen=True)
class RetryOptions:
    """
    Immutable retry configuration.

    ``max_number_of_retries`` counts retries after the first attempt, so the
    operation runs at most ``max_number_of_retries + 1`` times.
    """

    max_number_of_retries: int = 0
    delay: float = 500
    backoff_factor: float = 2
    max_delay: float = 30000
    retry_on_status: FrozenSet[int] = DEFAULT_RETRY_STATUS
    retry_on_error: Callable[[Any], bool] = is_network_error
    on_retry: Optional[Callable[[int, BaseException], None]] = None
    signal: Optional[RetrySignal] = None

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "RetryOptions":
        """
        Return a copy with ``overrides`` applied; ``None`` values are ignored.
        """
        if not overrides:
            return self
        known = {field.name for field in dataclasses.fields(self)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown retry option '{key}'")
            if value is None:
                continue
            if key == "retry_on_status":
                value = frozenset(value)
            changes[key] = value
        return dataclasses.replace(self, **changes)


DEFAULT_RETRY_OPTIONS = RetryOptions()


def _retry_after_ms(error: BaseException) -> Optional[float]:
    headers = getattr(error, "headers", None)
    if not headers:
        return None
    raw = headers.get("retry-after")
    if raw is None:
        raw = headers.get("Retry-After")
    if raw is None or raw == "":
        return None
    try:
        return float(raw) * 1000
    except (TypeError, ValueError):
        # HTTP-date form is not supported; fall back to computed backoff.
        return None


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: RetryOptions,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    Await ``operation`` until it succeeds or the retry budget is spent.

    The final error is re-raised unchanged. A negative
    ``max_number_of_retries`` skips the loop entirely and raises
    :class:`SDKError`.
    """
    attempt = 0
    wait_time = options.delay

    while attempt <= options.max_number_of_retries:
        if options.signal is not None and options.signal.is_set():
            raise AbortError("Retry aborted")
        try:
            return await operation()
        except Exception as error:
            status = getattr(error, "status", None)
            should_retry = (
                status is not None and status in options.retry_on_status
            ) or bool(options.retry_on_error(error))

            if attempt == options.max_number_of_retries or not should_retry:
                raise

            if options.on_retry is not None:
                options.on_retry(attempt + 1, error)

            retry_after = _retry_after_ms(error)
            if retry_after is not None:
                wait_time = retry_after
            else:
                wait_time = min(wait_time * options.backoff_factor, options.max_delay)
                wait_time = wait_time * random.uniform(0.8, 1.2)

            logger.debug(
                "Retrying after %s (attempt %d of %d) in %.0f ms",
                type(error).__name__,
                attempt + 1,
                options.max_number_of_retries,
                wait_time,
            )
            await sleep(wait_time / 1000)
            attempt += 1

    raise SDKError("Retry failed after maximum attempts")
