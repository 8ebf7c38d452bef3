"""Webhook subscription management."""

from __future__ import annotations

from typing import Any, Optional

from .errors import ParseError
from .service import Service
from .types import WebhookSubscription


class WebhooksService(Service):
    """Register endpoints that receive platform events."""

    async def list(self) -> list[WebhookSubscription]:
        data = await self._request("GET", "/webhooks")
        return self._decode_list(WebhookSubscription.from_dict, data, envelope=True)

    async def get(self, webhook_id: str) -> WebhookSubscription:
        data = await self._request("GET", f"/webhooks/{webhook_id}")
        return self._decode(WebhookSubscription.from_dict, data)

    async def create(
        self,
        url: str,
        events: list[str],
        *,
        description: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> WebhookSubscription:
        """
        Register a webhook endpoint.

        Args:
            url: Endpoint receiving the events
            events: Event types to subscribe to (e.g. "investment.created")
            description: Optional description
            secret: Shared secret for signing deliveries; generated by the
                platform when omitted

        Returns:
            The created subscription
        """
        body: dict[str, Any] = {"url": url, "events": events}
        if description:
            body["description"] = description
        if secret:
            body["secret"] = secret

        data = await self._request("POST", "/webhooks", json=body)
        return self._decode(WebhookSubscription.from_dict, data)

    async def update(
        self,
        webhook_id: str,
        *,
        url: Optional[str] = None,
        events: Optional[list[str]] = None,
        active: Optional[bool] = None,
        description: Optional[str] = None,
    ) -> WebhookSubscription:
        """
        Update a webhook subscription. Only provided fields are changed.

        Args:
            webhook_id: The subscription ID
        """
        body: dict[str, Any] = {}
        if url is not None:
            body["url"] = url
        if events is not None:
            body["events"] = events
        if active is not None:
            body["active"] = active
        if description is not None:
            body["description"] = description

        data = await self._request("PATCH", f"/webhooks/{webhook_id}", json=body)
        return self._decode(WebhookSubscription.from_dict, data)

    async def delete(self, webhook_id: str) -> None:
        await self._request("DELETE", f"/webhooks/{webhook_id}")

    async def test(self, webhook_id: str) -> bool:
        """Ask the platform to send a test event to the endpoint."""
        data = await self._request("POST", f"/webhooks/{webhook_id}/test")
        if not isinstance(data, dict) or not isinstance(data.get("success"), bool):
            raise ParseError("Expected a success flag in the webhook test response")
        return data["success"]
