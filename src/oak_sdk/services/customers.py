"""
Customer resource.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..core.client import OakClient, bearer_headers, with_auth
from ..core.errors import OakError
from ..core.result import Result
from ..core.urls import build_query_string, build_url
from .helpers import wrap_failure

__all__ = ["CUSTOMER_LIST_PARAMS", "CustomerService"]

CUSTOMERS_PATH = "api/v1/customers"

CUSTOMER_LIST_PARAMS = (
    "limit",
    "offset",
    "target_role",
    "provider_registration_status",
    "provider",
    "email",
    "document_type",
    "country_code",
)


class CustomerService:
    """
    Create, fetch, list and update customers.

    Every method returns a :class:`~oak_sdk.core.result.Result`. Token
    failures are returned untouched; request failures are wrapped in an
    :class:`~oak_sdk.core.errors.SDKError` whose ``cause`` is the original.
    """

    def __init__(self, client: OakClient) -> None:
        self.client = client

    def _url(self, *segments: Optional[str]) -> str:
        return build_url(self.client.config.base_url, CUSTOMERS_PATH, *segments)

    async def create(self, customer: Mapping[str, Any]) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.post(
                self._url(),
                dict(customer),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to create customer")

        return await with_auth(self.client, operation)

    async def get(self, customer_id: str) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.get(
                self._url(customer_id),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to retrieve customer")

        return await with_auth(self.client, operation)

    async def list(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> Result[Dict[str, Any], OakError]:
        unknown = set(params or {}) - set(CUSTOMER_LIST_PARAMS)
        if unknown:
            raise TypeError(f"Unknown customer list parameter(s): {', '.join(sorted(unknown))}")

        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.get(
                self._url() + build_query_string(params),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to list customers")

        return await with_auth(self.client, operation)

    async def update(
        self, customer_id: str, customer: Mapping[str, Any]
    ) -> Result[Dict[str, Any], OakError]:
        async def operation(token: str) -> Result[Dict[str, Any], OakError]:
            response = await self.client.http.put(
                self._url(customer_id),
                dict(customer),
                headers=bearer_headers(token),
                retry_options=self.client.retry_options,
            )
            return wrap_failure(response, "Failed to update customer")

        return await with_auth(self.client, operation)
