"""XRPL.Sale API client."""

import logging
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

import httpx

from .analytics import AnalyticsService
from .auth import AuthManager, Signer
from .config import ClientConfig, user_agent
from .errors import APIError, NetworkError, ParseError
from .investments import InvestmentsService
from .projects import ProjectsService
from .retry import RetryPolicy
from .signature import WebhookSignatureValidator, verify_signature
from .types import format_datetime
from .webhooks import WebhooksService

logger = logging.getLogger(__name__)

QueryValue = Union[str, int, float, bool, Enum, datetime, date, None]


def _query_value(value: QueryValue) -> Union[str, int, float]:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return format_datetime(value)
    return value


def _retry_after(response: httpx.Response) -> Optional[float]:
    raw = response.headers.get("Retry-After")
    if not raw:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


class XRPLSaleClient:
    """
    Async client for the XRPL.Sale launchpad API.

    All services share one connection pool and one session token.

    Example:
        ```python
        async with XRPLSaleClient.create("your-api-key", environment="testnet") as client:
            project = await client.projects.get("proj_abc123")
        ```
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        signer: Optional[Signer] = None,
        wallet_address: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Validated client configuration
            signer: Signs auth challenges, enabling automatic token refresh
            wallet_address: Wallet used for challenge-response auth
            headers: Additional headers to include in all requests
        """
        self.config = config
        self.base_url = config.resolved_base_url
        self.retry_policy = RetryPolicy.from_config(config)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.timeout,
            headers={
                "Accept": "application/json",
                "User-Agent": user_agent(),
                **(headers or {}),
            },
        )
        self.auth = AuthManager(
            config.api_key,
            self._send_unauthenticated,
            signer=signer,
            wallet_address=wallet_address,
        )
        self.projects = ProjectsService(self)
        self.investments = InvestmentsService(self)
        self.analytics = AnalyticsService(self)
        self.webhooks = WebhooksService(self)

    @classmethod
    def create(
        cls,
        api_key: str,
        *,
        signer: Optional[Signer] = None,
        wallet_address: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        **options: Any,
    ) -> "XRPLSaleClient":
        """Build a client from keyword options (see `ClientConfig.create`)."""
        config = ClientConfig.create(api_key, **options)
        return cls(config, signer=signer, wallet_address=wallet_address, headers=headers)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "XRPLSaleClient":
        """Build a client from XRPLSALE_* environment variables."""
        return cls(ClientConfig.from_env(), **kwargs)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "XRPLSaleClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # ==========================================
    # Webhooks
    # ==========================================

    def webhook_validator(self) -> Optional[WebhookSignatureValidator]:
        """Validator for the configured webhook secret, if any."""
        if not self.config.webhook_secret:
            return None
        return WebhookSignatureValidator(self.config.webhook_secret)

    def verify_webhook(self, payload: Union[str, bytes], signature: Optional[str]) -> bool:
        """
        Verify a webhook signature with the configured secret.

        Raises:
            ConfigurationError: If no webhook secret is configured
        """
        return verify_signature(payload, signature, self.config.webhook_secret or "")

    # ==========================================
    # Requests
    # ==========================================

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, QueryValue]] = None,
        json: Optional[Any] = None,
        auth: bool = True,
    ) -> Any:
        """
        Make an API request with retries.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            params: Query parameters; None values are dropped
            json: JSON request body
            auth: Resolve session auth (bearer token or API key); when False
                only the API key is sent

        Returns:
            The decoded JSON body, or None for empty responses

        Raises:
            APIError: For error responses that are not retried
            RetriesExhaustedError: If every attempt failed transiently
            TokenExpiredError: If the session expired and cannot be refreshed
        """
        query = None
        if params:
            query = {k: _query_value(v) for k, v in params.items() if v is not None}

        async def attempt() -> Any:
            if auth:
                headers = await self.auth.headers()
            else:
                headers = {"X-API-Key": self.config.api_key}
            return await self._send(method, path, params=query, json=json, headers=headers)

        return await self.retry_policy.execute(attempt)

    async def _send_unauthenticated(
        self, method: str, path: str, *, json: Optional[Any] = None
    ) -> Any:
        return await self.request(method, path, json=json, auth=False)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Make a single HTTP request."""
        url = path if path.startswith("/") else f"/{path}"
        try:
            response = await self._client.request(
                method, url, params=params, json=json, headers=headers
            )
        except httpx.TransportError as err:
            raise NetworkError(f"{method} {url} failed: {err}") from err

        if self.config.debug:
            logger.debug("HTTP %s %s -> %d", method, response.request.url, response.status_code)

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            raise APIError.from_response(
                response.status_code,
                body,
                url=str(response.request.url),
                retry_after=_retry_after(response) if response.status_code == 429 else None,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as err:
            if self.config.debug:
                logger.debug("Failed to parse response: %s", response.text)
            raise ParseError(f"Invalid JSON in response to {method} {url}") from err
