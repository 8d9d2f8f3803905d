"""
Client-credentials token cache for the Oak API.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .config import OakConfig
from .errors import ApiError, OakError, ParseError
from .http import HttpClient
from .result import Result, err, ok
from .retry import RetryOptions

__all__ = ["AuthManager", "TokenResponse", "TOKEN_REFRESH_MARGIN_MS"]

logger = logging.getLogger(__name__)

TOKEN_GRANT_PATH = "/api/v1/merchant/token/grant"

# Tokens are renewed this long before they expire.
TOKEN_REFRESH_MARGIN_MS = 60_000


def _now_ms() -> float:
    return time.time() * 1000


@dataclass(frozen=True)
class TokenResponse:
    access_token: str
    token_type: Optional[str]
    expires_in: float
    raw: Dict[str, Any]

    @classmethod
    def from_response(cls, payload: Any) -> "TokenResponse":
        if not isinstance(payload, dict):
            raise ValueError("token grant response is not an object")
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("token grant response has no access_token")
        expires_in = payload.get("expires_in")
        if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)):
            raise ValueError("token grant response has no numeric expires_in")
        return cls(
            access_token=access_token,
            token_type=payload.get("token_type"),
            expires_in=expires_in,
            raw=payload,
        )


class AuthManager:
    """
    Holds one bearer token per client and renews it when it nears expiry.

    Concurrent callers that find the token stale share a single in-flight
    grant request.
    """

    def __init__(
        self,
        config: OakConfig,
        retry_options: RetryOptions,
        http: HttpClient,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config
        self.retry_options = retry_options
        self._http = http
        self._clock = clock or _now_ms
        self._access_token: Optional[str] = None
        self._expires_at: Optional[float] = None
        self._refresh: Optional[asyncio.Task] = None

    @property
    def token_grant_url(self) -> str:
        return f"{self.config.base_url}{TOKEN_GRANT_PATH}"

    def _needs_refresh(self) -> bool:
        if self._access_token is None or self._expires_at is None:
            return True
        return self._clock() >= self._expires_at - TOKEN_REFRESH_MARGIN_MS

    async def grant_token(self) -> Result[TokenResponse, OakError]:
        """
        Request a new token unconditionally and cache it.

        ``expires_in`` is added to the current clock reading as received.
        """
        payload = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "grant_type": "client_credentials",
        }
        logger.debug("Requesting access token from %s", self.token_grant_url)
        response = await self._http.post(
            self.token_grant_url,
            payload,
            retry_options=self.retry_options,
        )
        if not response.ok:
            error = response.error
            if isinstance(error, ApiError) and error.status == 401:
                self._access_token = None
                self._expires_at = None
            logger.info("Token grant failed: %s", error.message)
            return err(error)

        try:
            token = TokenResponse.from_response(response.value)
        except ValueError as exc:
            return err(ParseError(f"Malformed token grant response: {exc}", exc))

        self._access_token = token.access_token
        self._expires_at = self._clock() + token.expires_in
        return ok(token)

    async def get_access_token(self) -> Result[str, OakError]:
        """
        Return the cached token, granting a new one when absent or stale.
        """
        if not self._needs_refresh() and self._access_token is not None:
            return ok(self._access_token)

        if self._refresh is None:
            task = asyncio.ensure_future(self.grant_token())
            self._refresh = task
            task.add_done_callback(self._clear_refresh)

        response = await asyncio.shield(self._refresh)
        if not response.ok:
            return response
        return ok(response.value.access_token)

    def _clear_refresh(self, task: "asyncio.Future[Any]") -> None:
        if self._refresh is task:
            self._refresh = None
