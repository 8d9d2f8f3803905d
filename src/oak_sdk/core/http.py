"""
Async JSON transport that drives every request through the retry engine.

Nothing raised by a request escapes :class:`HttpClient`; each verb returns a
:class:`~oak_sdk.core.result.Result`.
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import json
import logging
import os
from importlib import metadata
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from .errors import ApiError, NetworkError, OakError, ParseError, SDKError
from .result import Result, err, ok
from .retry import DEFAULT_RETRY_OPTIONS, RetryOptions, RetrySignal, with_retry

__all__ = ["HttpClient", "oak_version"]

logger = logging.getLogger(__name__)

VERSION_HEADER = "Oak-Version"

_NO_BODY = object()


@functools.lru_cache(maxsize=None)
def oak_version() -> str:
    """
    Version reported in the ``Oak-Version`` header.

    ``OAK_VERSION`` wins over the installed distribution metadata. The value is
    resolved once per process.
    """
    override = os.environ.get("OAK_VERSION")
    if override:
        return override
    try:
        return metadata.version("oak-sdk")
    except metadata.PackageNotFoundError:
        return "unknown"


def _merge_headers(headers: Optional[Mapping[str, str]]) -> httpx.Headers:
    # Header names compare case-insensitively, so "content-type" replaces the default.
    merged = httpx.Headers(
        {
            "Content-Type": "application/json",
            VERSION_HEADER: oak_version(),
        }
    )
    if headers:
        merged.update(headers)
    return merged


def _parse_body(response: httpx.Response, url: str) -> Any:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError as exc:
        raise ParseError(f"Failed to parse JSON response from {url}", exc) from exc
    return {} if body is None else body


def _error_message(body: Any) -> str:
    if isinstance(body, dict) and body.get("msg"):
        return str(body["msg"])
    return "HTTP error"


class HttpClient:
    """
    Thin wrapper around :class:`httpx.AsyncClient`.

    An injected ``client`` stays owned by the caller; otherwise one is created
    here and released by :meth:`aclose`.
    """

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._client = client
        self._sleep = sleep

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def get(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_options: RetryOptions = DEFAULT_RETRY_OPTIONS,
        signal: Optional[RetrySignal] = None,
    ) -> Result[Any, OakError]:
        return await self._send("GET", url, _NO_BODY, headers, retry_options, signal)

    async def delete(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_options: RetryOptions = DEFAULT_RETRY_OPTIONS,
        signal: Optional[RetrySignal] = None,
    ) -> Result[Any, OakError]:
        return await self._send("DELETE", url, _NO_BODY, headers, retry_options, signal)

    async def post(
        self,
        url: str,
        body: Any,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_options: RetryOptions = DEFAULT_RETRY_OPTIONS,
        signal: Optional[RetrySignal] = None,
    ) -> Result[Any, OakError]:
        return await self._send("POST", url, body, headers, retry_options, signal)

    async def put(
        self,
        url: str,
        body: Any,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_options: RetryOptions = DEFAULT_RETRY_OPTIONS,
        signal: Optional[RetrySignal] = None,
    ) -> Result[Any, OakError]:
        return await self._send("PUT", url, body, headers, retry_options, signal)

    async def patch(
        self,
        url: str,
        body: Any = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_options: RetryOptions = DEFAULT_RETRY_OPTIONS,
        signal: Optional[RetrySignal] = None,
    ) -> Result[Any, OakError]:
        # A missing PATCH body is sent as no body at all, unlike ``{}``.
        return await self._send(
            "PATCH",
            url,
            _NO_BODY if body is None else body,
            headers,
            retry_options,
            signal,
        )

    async def _send(
        self,
        method: str,
        url: str,
        body: Any,
        headers: Optional[Mapping[str, str]],
        retry_options: RetryOptions,
        signal: Optional[RetrySignal],
    ) -> Result[Any, OakError]:
        if signal is not None:
            retry_options = dataclasses.replace(retry_options, signal=signal)
        request_headers = _merge_headers(headers)

        try:
            content = None if body is _NO_BODY else json.dumps(body)

            async def operation() -> Any:
                logger.debug("%s %s", method, url)
                try:
                    response = await self._client.request(
                        method, url, headers=request_headers, content=content
                    )
                except httpx.TransportError as exc:
                    raise NetworkError(
                        f"Network error during {method} {url}: {exc}", exc
                    ) from exc

                response_body = _parse_body(response, url)
                if not response.is_success:
                    raise ApiError(
                        _error_message(response_body),
                        response.status_code,
                        response_body,
                        response.headers,
                    )
                return response_body

            value = await with_retry(operation, retry_options, sleep=self._sleep)
        except OakError as error:
            logger.debug(
                "%s %s failed: %s (status=%s)",
                method,
                url,
                type(error).__name__,
                getattr(error, "status", None),
            )
            return err(error)
        except Exception as error:
            return err(SDKError("Unexpected error during HTTP request", error))
        return ok(value)
