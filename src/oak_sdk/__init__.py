"""
Public facade for the Oak payments SDK.

The module re-exports the most useful pieces for integrators so they can
``from oak_sdk import ...`` without navigating the package.
"""

from .api import create_crowdsplit, create_oak_client
from .core import (
    DEFAULT_RETRY_OPTIONS,
    AbortError,
    ApiError,
    ConfigError,
    EnvironmentViolationError,
    Err,
    NetworkError,
    OakClient,
    OakConfig,
    OakError,
    OakParameters,
    Ok,
    ParseError,
    Result,
    RetryOptions,
    SDKError,
    SIGNATURE_HEADER,
    TokenResponse,
    build_query_string,
    build_url,
    err,
    load_oak_config,
    ok,
    parse_webhook_payload,
    sandbox_only,
    verify_webhook_signature,
    with_auth,
    with_retry,
)
from .services import Crowdsplit, CustomerService, WebhookService

__all__ = (
    "AbortError",
    "ApiError",
    "ConfigError",
    "Crowdsplit",
    "CustomerService",
    "DEFAULT_RETRY_OPTIONS",
    "EnvironmentViolationError",
    "Err",
    "NetworkError",
    "OakClient",
    "OakConfig",
    "OakError",
    "OakParameters",
    "Ok",
    "ParseError",
    "Result",
    "RetryOptions",
    "SDKError",
    "SIGNATURE_HEADER",
    "TokenResponse",
    "WebhookService",
    "build_query_string",
    "build_url",
    "create_crowdsplit",
    "create_oak_client",
    "err",
    "load_oak_config",
    "ok",
    "parse_webhook_payload",
    "sandbox_only",
    "verify_webhook_signature",
    "with_auth",
    "with_retry",
)
