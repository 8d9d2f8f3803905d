"""
Public, high-level helpers for constructing Oak clients.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from .core.client import OakClient
from .core.config import ConfigError, OakConfig, OakParameters, load_oak_config
from .services import Crowdsplit

__all__ = [
    "ConfigError",
    "OakClient",
    "OakConfig",
    "OakParameters",
    "create_crowdsplit",
    "create_oak_client",
    "load_oak_config",
]


def create_oak_client(
    *,
    config: Optional[OakConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    retry_options: Optional[Mapping[str, Any]] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[OakParameters] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    environment: Optional[str] = None,
    base_url: Optional[str] = None,
) -> OakClient:
    """
    Construct an :class:`OakClient`.

    Callers can either supply a ready-made :class:`OakConfig` or let the
    helper assemble one from environment data. ``retry_options`` is a partial
    override merged over the configured retry options either way.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            client_id,
            client_secret,
            environment,
            base_url,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built OakConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_oak_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            client_id=client_id,
            client_secret=client_secret,
            environment=environment,
            base_url=base_url,
        )
    if retry_options:
        cfg = cfg.with_retry_overrides(retry_options)
    return OakClient(cfg, http_client=http_client)


def create_crowdsplit(client: OakClient) -> Crowdsplit:
    """
    Bundle the Crowdsplit resource services over ``client``.
    """
    return Crowdsplit.for_client(client)
