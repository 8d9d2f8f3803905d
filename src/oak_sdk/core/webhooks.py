"""
Webhook signature verification.

Oak signs each delivery with the hex HMAC-SHA256 of the raw request body,
keyed with the webhook's shared secret. By convention the digest travels in
the ``x-oak-signature`` header.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from typing import Any, Union

from .errors import ApiError
from .result import Result, err, ok

__all__ = [
    "SIGNATURE_HEADER",
    "compute_webhook_signature",
    "parse_webhook_payload",
    "verify_webhook_signature",
]

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-oak-signature"


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def compute_webhook_signature(payload: Union[str, bytes], secret: Union[str, bytes]) -> str:
    return hmac.new(_as_bytes(secret), _as_bytes(payload), hashlib.sha256).hexdigest()


def verify_webhook_signature(
    payload: Union[str, bytes],
    signature: str,
    secret: Union[str, bytes],
) -> bool:
    """
    Check ``signature`` against the HMAC-SHA256 of ``payload``.

    Never raises. A signature of the wrong length is rejected before the
    constant-time comparison runs.
    """
    try:
        expected = compute_webhook_signature(payload, secret).encode("utf-8")
        received = _as_bytes(signature)
        if len(received) != len(expected):
            return False
        return hmac.compare_digest(received, expected)
    except (TypeError, ValueError, AttributeError):
        return False


def parse_webhook_payload(
    payload: Union[str, bytes],
    signature: str,
    secret: Union[str, bytes],
) -> Result[Any, ApiError]:
    """
    Verify ``payload`` and decode it as JSON in one step.

    A bad signature yields a 401 :class:`ApiError`; undecodable JSON a 400.
    """
    if not verify_webhook_signature(payload, signature, secret):
        logger.warning("Rejected webhook delivery with an invalid signature")
        return err(
            ApiError(
                "Invalid webhook signature",
                401,
                {"code": "WEBHOOK_VERIFICATION_FAILED"},
            )
        )

    try:
        parsed = json.loads(payload)
    except ValueError as exc:
        return err(
            ApiError(
                f"Failed to parse webhook payload: {exc}",
                400,
                {"code": "WEBHOOK_PARSE_ERROR"},
                cause=exc,
            )
        )
    return ok(parsed)
