"""
Utilities for building the environment used to configure the Oak client.

The helpers understand .env files, allow callers to layer overrides, and map
the sandbox/production switch onto the base URL published for each.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Literal, Mapping, Optional

__all__ = [
    "ConfigError",
    "ENVIRONMENT_URL_KEYS",
    "EnvironmentConfig",
    "EnvironmentVariables",
    "OakEnvironment",
    "build_environment",
    "get_environment_config",
    "is_test_environment",
    "resolve_base_url",
]

OakEnvironment = Literal["sandbox", "production"]

ENVIRONMENT_URL_KEYS: Dict[str, str] = {
    "sandbox": "CROWDSPLIT_SANDBOX_URL",
    "production": "CROWDSPLIT_PRODUCTION_URL",
}


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _parse_env_file(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key.strip()] = value
    return values


@dataclass(frozen=True)
class EnvironmentVariables:
    """
    A resolved set of variables used to configure the client.
    """

    variables: Mapping[str, str]


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> EnvironmentVariables:
    """
    Assemble :class:`EnvironmentVariables` from multiple sources.

    ``base`` defaults to :data:`os.environ`. ``env_file`` is optional; set it to
    ``None`` to skip file loading entirely. ``overrides`` always win.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in _parse_env_file(Path(env_file)).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return EnvironmentVariables(variables=merged)


@dataclass(frozen=True)
class EnvironmentConfig:
    api_url: str
    allows_test_operations: bool


def get_environment_config(
    environment: OakEnvironment,
    variables: Optional[Mapping[str, str]] = None,
) -> EnvironmentConfig:
    """
    Resolve the API URL published for ``environment``.

    :raises ConfigError: when the environment is unknown or its URL variable is unset
    """
    source = os.environ if variables is None else variables
    try:
        key = ENVIRONMENT_URL_KEYS[environment]
    except KeyError as exc:
        raise ConfigError(
            f"Unknown environment '{environment}', expected one of "
            f"{', '.join(ENVIRONMENT_URL_KEYS)}"
        ) from exc

    api_url = source.get(key)
    if not api_url:
        raise ConfigError(
            f"Missing required environment variable: {key} for {environment} environment"
        )
    return EnvironmentConfig(
        api_url=api_url.rstrip("/"),
        allows_test_operations=is_test_environment(environment),
    )


def resolve_base_url(
    environment: OakEnvironment,
    custom_url: Optional[str] = None,
    variables: Optional[Mapping[str, str]] = None,
) -> str:
    if custom_url:
        return custom_url.rstrip("/")
    return get_environment_config(environment, variables).api_url


def is_test_environment(environment: str) -> bool:
    return environment == "sandbox"
