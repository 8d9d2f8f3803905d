"""
Merchant webhook registrations and delivery notifications.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..core.client import OakClient, bearer_headers, with_auth
from ..core.errors import OakError, SDKError
from ..core.result import Err, Result, err
from ..core.urls import build_query_string, build_url
from .helpers import error_body_message, wrap_failure

__all__ = ["WebhookService"]

WEBHOOKS_PATH = "api/v1/merchant/webhooks"

ALREADY_REGISTERED_MESSAGE = "This URL is Already Registered!"


class WebhookService:
    def __init__(self, client: OakClient) -> None:
        self.client = client

    def _url(self, *segments: Optional[str]) -> str:
        return build_url(self.client.config.base_url, WEBHOOKS_PATH, *segments)

    async def register(self, webhook: Mapping[str, Any]) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.post(
                self._url(),
                dict(webhook),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            if isinstance(response, Err):
                if error_body_message(response.error) == ALREADY_REGISTERED_MESSAGE:
                    return err(
                        SDKError("Webhook URL is already registered.", response.error)
                    )
                return err(SDKError("Failed to create webhook", response.error))
            return response

        return await with_auth(self.client, operation)

    async def list(self) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.get(
                self._url(),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to get webhook list")

        return await with_auth(self.client, operation)

    async def get(self, webhook_id: str) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.get(
                self._url(webhook_id),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to get webhook")

        return await with_auth(self.client, operation)

    async def update(
        self, webhook_id: str, webhook: Mapping[str, Any]
    ) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.put(
                self._url(webhook_id),
                dict(webhook),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to update webhook")

        return await with_auth(self.client, operation)

    async def toggle(self, webhook_id: str) -> Result[Dict[str, Any], OakError]:
        """Flip a webhook between active and inactive; sends no body."""

        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.patch(
                self._url(webhook_id, "toggle"),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to toggle webhook")

        return await with_auth(self.client, operation)

    async def delete(self, webhook_id: str) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.delete(
                self._url(webhook_id),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to delete webhook")

        return await with_auth(self.client, operation)

    async def list_notifications(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.get(
                self._url("notifications") + build_query_string(params),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to get webhook notifications")

        return await with_auth(self.client, operation)

    async def get_notification(self, notification_id: str) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.get(
                self._url("notifications", notification_id),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to get webhook notification")

        return await with_auth(self.client, operation)
