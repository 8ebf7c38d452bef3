"""Webhook signature verification."""

import hashlib
import hmac
import json
from typing import Any, Optional, Union

from .errors import (
    ConfigurationError,
    InvalidSignatureError,
    WebhookPayloadError,
)
from .types import WebhookEvent

SIGNATURE_HEADER = "X-XRPL-Sale-Signature"
SIGNATURE_PREFIX = "sha256="

# Event types delivered by the platform
EVENT_PROJECT_LAUNCHED = "project.launched"
EVENT_PROJECT_COMPLETED = "project.completed"
EVENT_PROJECT_CANCELLED = "project.cancelled"
EVENT_INVESTMENT_CREATED = "investment.created"
EVENT_INVESTMENT_CONFIRMED = "investment.confirmed"
EVENT_TIER_COMPLETED = "tier.completed"


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def _require_secret(secret: Optional[str]) -> str:
    if not secret:
        raise ConfigurationError("Webhook secret is not configured")
    return secret


def compute_signature(payload: Union[str, bytes], secret: str) -> str:
    """
    Compute the HMAC-SHA256 signature of a webhook payload.

    Args:
        payload: The raw request body
        secret: The shared webhook secret

    Returns:
        The lowercase hex digest
    """
    secret = _require_secret(secret)
    return hmac.new(secret.encode("utf-8"), _to_bytes(payload), hashlib.sha256).hexdigest()


def verify_signature(
    payload: Union[str, bytes],
    signature: Optional[str],
    secret: str,
) -> bool:
    """
    Verify a webhook signature from XRPL.Sale.

    The signature may be the bare hex digest or carry a "sha256=" prefix.
    Malformed signatures simply fail verification.

    Args:
        payload: The raw request body as a string or bytes
        signature: The X-XRPL-Sale-Signature header value
        secret: Your webhook secret

    Returns:
        True if the signature matches

    Raises:
        ConfigurationError: If the secret is missing
    """
    expected = compute_signature(payload, secret)
    if not signature or not isinstance(signature, str):
        return False
    if signature.startswith(SIGNATURE_PREFIX):
        signature = signature[len(SIGNATURE_PREFIX):]
    try:
        provided = signature.encode("ascii")
    except UnicodeEncodeError:
        return False

    # Compare signatures using timing-safe comparison
    return hmac.compare_digest(provided, expected.encode("ascii"))


class WebhookSignatureValidator:
    """Verifies and parses webhooks with a fixed secret."""

    def __init__(self, secret: str) -> None:
        self._secret = _require_secret(secret)

    def verify(self, payload: Union[str, bytes], signature: Optional[str]) -> bool:
        return verify_signature(payload, signature, self._secret)

    def sign(self, payload: Union[str, bytes]) -> str:
        return compute_signature(payload, self._secret)

    def construct_event(
        self, payload: Union[str, bytes], signature: Optional[str]
    ) -> WebhookEvent:
        """
        Verify a webhook and parse it into an event.

        Raises:
            InvalidSignatureError: If the signature does not match
            WebhookPayloadError: If the body is not a webhook event
        """
        if not self.verify(payload, signature):
            raise InvalidSignatureError()
        return parse_event(payload)


def parse_event(payload: Union[str, bytes]) -> WebhookEvent:
    """
    Parse a webhook body without verifying it.

    Raises:
        WebhookPayloadError: If the body is not a JSON object with an event_type
    """
    try:
        body = json.loads(payload)
    except ValueError as err:
        raise WebhookPayloadError(f"Webhook body is not valid JSON: {err}") from err
    if not isinstance(body, dict) or not isinstance(body.get("event_type"), str):
        raise WebhookPayloadError("Webhook body must be an object with an event_type")
    try:
        return WebhookEvent.from_dict(body)
    except (TypeError, ValueError, OverflowError, OSError) as err:
        raise WebhookPayloadError(f"Invalid webhook timestamp: {err}") from err


def extract_webhook_signature(headers: Any) -> str:
    """
    Read the signature header from a request headers object.

    Works with plain dicts (any key case) and multi-value header mappings.

    Args:
        headers: Headers mapping from the request

    Returns:
        The signature, or "" if absent
    """

    def normalize(value: Any) -> str:
        if isinstance(value, list):
            return str(value[0]) if value else ""
        return str(value) if value else ""

    # Try exact match first
    if SIGNATURE_HEADER in headers:
        return normalize(headers[SIGNATURE_HEADER])
    lower_name = SIGNATURE_HEADER.lower()
    for key, value in headers.items():
        if key.lower() == lower_name:
            return normalize(value)
    return ""
