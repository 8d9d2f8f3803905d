"""
Configuration objects and helpers for the Oak client.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .environment import (
    ConfigError,
    OakEnvironment,
    build_environment,
    resolve_base_url,
)
from .retry import DEFAULT_RETRY_OPTIONS, RetryOptions

__all__ = [
    "ConfigError",
    "OakConfig",
    "OakParameters",
    "load_oak_config",
]

_PARAMETER_TO_ENV_KEY = {
    "client_id": "OAK_CLIENT_ID",
    "client_secret": "OAK_CLIENT_SECRET",
    "environment": "OAK_ENVIRONMENT",
    "base_url": "OAK_BASE_URL",
    "max_number_of_retries": "OAK_MAX_NUMBER_OF_RETRIES",
    "retry_delay_ms": "OAK_RETRY_DELAY_MS",
    "retry_max_delay_ms": "OAK_RETRY_MAX_DELAY_MS",
}

_ENVIRONMENTS = ("sandbox", "production")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class OakParameters:
    """
    Explicit parameter bundle for constructing :class:`OakConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_oak_config`.
    """

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    environment: Optional[str] = None
    base_url: Optional[str] = None
    max_number_of_retries: Optional[int | str] = None
    retry_delay_ms: Optional[int | str] = None
    retry_max_delay_ms: Optional[int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[OakParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown Oak parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _require(values: Mapping[str, str], key: str) -> str:
    raw = values.get(key)
    if raw is None or not raw.strip():
        raise ConfigError(f"{key} must be provided")
    return raw.strip()


def _optional_int(values: Mapping[str, str], key: str, *, minimum: int) -> Optional[int]:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        parsed = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got '{raw}'") from exc
    if parsed < minimum:
        raise ConfigError(f"{key} must be at least {minimum}")
    return parsed


def _normalize_environment(raw: str) -> OakEnvironment:
    value = raw.strip().lower()
    if value not in _ENVIRONMENTS:
        raise ConfigError(
            f"OAK_ENVIRONMENT must be one of {', '.join(_ENVIRONMENTS)}, got '{raw}'"
        )
    return value  # type: ignore[return-value]


@dataclass(frozen=True)
class OakConfig:
    client_id: str
    client_secret: str = dataclasses.field(repr=False)
    base_url: str
    environment: OakEnvironment = "sandbox"
    retry_options: RetryOptions = DEFAULT_RETRY_OPTIONS

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigError("base_url must not be empty")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def with_retry_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "OakConfig":
        """
        Return a copy whose retry options have ``overrides`` merged in.
        """
        return dataclasses.replace(
            self, retry_options=self.retry_options.merged(overrides)
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "OakConfig":
        client_id = _require(values, "OAK_CLIENT_ID")
        client_secret = _require(values, "OAK_CLIENT_SECRET")
        environment = _normalize_environment(values.get("OAK_ENVIRONMENT", "sandbox"))
        base_url = resolve_base_url(environment, values.get("OAK_BASE_URL"), values)

        retry_overrides = {
            "max_number_of_retries": _optional_int(
                values, "OAK_MAX_NUMBER_OF_RETRIES", minimum=0
            ),
            "delay": _optional_int(values, "OAK_RETRY_DELAY_MS", minimum=0),
            "max_delay": _optional_int(values, "OAK_RETRY_MAX_DELAY_MS", minimum=0),
        }

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            base_url=base_url,
            environment=environment,
            retry_options=DEFAULT_RETRY_OPTIONS.merged(retry_overrides),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[OakParameters] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        environment: Optional[str] = None,
        base_url: Optional[str] = None,
        max_number_of_retries: Optional[int | str] = None,
        retry_delay_ms: Optional[int | str] = None,
        retry_max_delay_ms: Optional[int | str] = None,
    ) -> "OakConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "client_id": client_id,
                "client_secret": client_secret,
                "environment": environment,
                "base_url": base_url,
                "max_number_of_retries": max_number_of_retries,
                "retry_delay_ms": retry_delay_ms,
                "retry_max_delay_ms": retry_max_delay_ms,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        variables = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(variables.variables)


def load_oak_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[OakParameters] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    environment: Optional[str] = None,
    base_url: Optional[str] = None,
    max_number_of_retries: Optional[int | str] = None,
    retry_delay_ms: Optional[int | str] = None,
    retry_max_delay_ms: Optional[int | str] = None,
) -> OakConfig:
    """
    Convenience wrapper that mirrors :meth:`OakConfig.from_env`.

    The configuration can be provided entirely through environment variables,
    a ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return OakConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        client_id=client_id,
        client_secret=client_secret,
        environment=environment,
        base_url=base_url,
        max_number_of_retries=max_number_of_retries,
        retry_delay_ms=retry_delay_ms,
        retry_max_delay_ms=retry_max_delay_ms,
    )
