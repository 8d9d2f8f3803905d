"""
Guard for operations that must never run against production.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Protocol, TypeVar

from .errors import EnvironmentViolationError

__all__ = ["sandbox_only", "sandbox_only_for"]

F = TypeVar("F", bound=Callable[..., Any])


class _HasEnvironment(Protocol):
    environment: str


class _HasConfig(Protocol):
    config: _HasEnvironment


def sandbox_only(fn: F, get_environment: Callable[[], str], method_name: str) -> F:
    """
    Wrap ``fn`` so every call first checks the resolved environment.

    The check runs before ``fn`` is invoked, so for coroutine functions the
    :class:`EnvironmentViolationError` is raised at call time rather than on
    ``await``.
    """

    @functools.wraps(fn)
    def guarded(*args: Any, **kwargs: Any) -> Any:
        environment = get_environment()
        if environment == "production":
            raise EnvironmentViolationError(method_name, environment)
        return fn(*args, **kwargs)

    return guarded  # type: ignore[return-value]


def sandbox_only_for(client: _HasConfig, fn: F, method_name: str) -> F:
    """Shorthand for :func:`sandbox_only` reading ``client.config.environment``."""
    return sandbox_only(fn, lambda: client.config.environment, method_name)
