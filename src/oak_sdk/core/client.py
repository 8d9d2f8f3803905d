"""
The configured client every resource service is built on.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import httpx

from .auth import AuthManager, TokenResponse
from .config import OakConfig
from .errors import OakError
from .http import HttpClient
from .result import Result, err
from .retry import RetryOptions

__all__ = ["OakClient", "bearer_headers", "with_auth"]

T = TypeVar("T")


def bearer_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class OakClient:
    """
    Owns the transport and the token cache for one set of credentials.

    Several clients with different credentials can coexist; nothing here is
    process-global.
    """

    def __init__(
        self,
        config: OakConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self.http = HttpClient(client=http_client, sleep=sleep)
        self._auth = AuthManager(config, config.retry_options, self.http, clock=clock)

    @property
    def retry_options(self) -> RetryOptions:
        return self.config.retry_options

    async def get_access_token(self) -> Result[str, OakError]:
        return await self._auth.get_access_token()

    async def grant_token(self) -> Result[TokenResponse, OakError]:
        return await self._auth.grant_token()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "OakClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


async def with_auth(
    client: OakClient,
    operation: Callable[[str], Awaitable[Result[T, OakError]]],
) -> Result[T, OakError]:
    """
    Fetch a token and hand it to ``operation``.

    A token failure is returned as-is and ``operation`` is not called.
    """
    token = await client.get_access_token()
    if not token.ok:
        return err(token.error)
    return await operation(token.value)
