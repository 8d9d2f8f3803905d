"""
Resource services built on :class:`~oak_sdk.core.client.OakClient`.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.client import OakClient
from .customers import CustomerService
from .webhooks import WebhookService

__all__ = ["Crowdsplit", "CustomerService", "WebhookService"]


@dataclass(frozen=True)
class Crowdsplit:
    """
    Product facade bundling the Crowdsplit services over one client.
    """

    customers: CustomerService
    webhooks: WebhookService

    @classmethod
    def for_client(cls, client: OakClient) -> "Crowdsplit":
        return cls(
            customers=CustomerService(client),
            webhooks=WebhookService(client),
        )
