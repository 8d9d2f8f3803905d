"""
Core primitives shared by every Oak resource: results, retries, transport,
token management and webhook verification.
"""

from .auth import AuthManager, TokenResponse
from .client import OakClient, bearer_headers, with_auth
from .config import ConfigError, OakConfig, OakParameters, load_oak_config
from .environment import (
    EnvironmentConfig,
    EnvironmentVariables,
    OakEnvironment,
    build_environment,
    get_environment_config,
    is_test_environment,
    resolve_base_url,
)
from .errors import (
    AbortError,
    ApiError,
    EnvironmentViolationError,
    NetworkError,
    OakError,
    ParseError,
    SDKError,
)
from .http import HttpClient
from .result import Err, Ok, Result, err, ok
from .retry import DEFAULT_RETRY_OPTIONS, RetryOptions, is_network_error, with_retry
from .sandbox import sandbox_only, sandbox_only_for
from .urls import build_query_string, build_url
from .webhooks import (
    SIGNATURE_HEADER,
    compute_webhook_signature,
    parse_webhook_payload,
    verify_webhook_signature,
)

__all__ = [
    "AbortError",
    "ApiError",
    "AuthManager",
    "ConfigError",
    "DEFAULT_RETRY_OPTIONS",
    "EnvironmentConfig",
    "EnvironmentVariables",
    "EnvironmentViolationError",
    "Err",
    "HttpClient",
    "NetworkError",
    "OakClient",
    "OakConfig",
    "OakEnvironment",
    "OakError",
    "OakParameters",
    "Ok",
    "ParseError",
    "Result",
    "RetryOptions",
    "SDKError",
    "SIGNATURE_HEADER",
    "TokenResponse",
    "bearer_headers",
    "build_environment",
    "build_query_string",
    "build_url",
    "compute_webhook_signature",
    "err",
    "get_environment_config",
    "is_network_error",
    "is_test_environment",
    "load_oak_config",
    "ok",
    "parse_webhook_payload",
    "resolve_base_url",
    "sandbox_only",
    "sandbox_only_for",
    "verify_webhook_signature",
    "with_auth",
    "with_retry",
]
