"""Client configuration for the XRPL.Sale SDK."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

import httpx

from .errors import ConfigurationError

SDK_VERSION = "1.0.0"

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY = 1.0
DEFAULT_RETRY_MAX_DELAY = 30.0


def user_agent() -> str:
    """User agent string sent with every request."""
    return f"XRPL.Sale-Python-SDK/{SDK_VERSION}"


class Environment(str, Enum):
    """XRPL.Sale API environments."""

    PRODUCTION = "production"
    TESTNET = "testnet"

    @property
    def base_url(self) -> str:
        """Base URL for this environment."""
        if self is Environment.TESTNET:
            return "https://api-testnet.xrpl.sale/v1"
        return "https://api.xrpl.sale/v1"

    @classmethod
    def parse(cls, value: Union[str, "Environment"]) -> "Environment":
        """Parse an environment name, accepting the short aliases."""
        if isinstance(value, Environment):
            return value
        name = value.strip().lower()
        if name in ("production", "prod"):
            return cls.PRODUCTION
        if name in ("testnet", "test"):
            return cls.TESTNET
        raise ConfigurationError(f"Invalid environment: {value!r}")


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client settings.

    Build instances with `ClientConfig.create` or `ClientConfig.from_env`,
    which validate every option.

    Attributes:
        api_key: API key sent as X-API-Key
        environment: Production or testnet
        base_url: Custom base URL, overrides the environment's URL
        timeout: Request timeout in seconds
        max_retries: Retries after the first attempt
        retry_base_delay: Backoff base in seconds (doubled per attempt)
        retry_max_delay: Upper bound for a single backoff wait
        retry_jitter: Extra random wait as a fraction of the backoff (0 disables)
        retry_statuses: Non-5xx statuses that are retried
        retry_server_errors: Retry 5xx responses
        webhook_secret: Shared secret for webhook signatures
        debug: Log every request and response at DEBUG level
    """

    api_key: str
    environment: Environment = Environment.PRODUCTION
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY
    retry_max_delay: float = DEFAULT_RETRY_MAX_DELAY
    retry_jitter: float = 0.0
    retry_statuses: tuple[int, ...] = (429,)
    retry_server_errors: bool = True
    webhook_secret: Optional[str] = None
    debug: bool = False

    @property
    def resolved_base_url(self) -> str:
        """The URL requests are sent to."""
        return (self.base_url or self.environment.base_url).rstrip("/")

    @classmethod
    def create(
        cls,
        api_key: str,
        *,
        environment: Union[str, Environment] = Environment.PRODUCTION,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY,
        retry_max_delay: float = DEFAULT_RETRY_MAX_DELAY,
        retry_jitter: float = 0.0,
        retry_statuses: tuple[int, ...] = (429,),
        retry_server_errors: bool = True,
        webhook_secret: Optional[str] = None,
        debug: bool = False,
    ) -> "ClientConfig":
        """
        Validate options and build a configuration.

        Raises:
            ConfigurationError: If any option is invalid
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("API key is required")
        if timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if max_retries < 0:
            raise ConfigurationError("max_retries must not be negative")
        if retry_base_delay < 0:
            raise ConfigurationError("retry_base_delay must not be negative")
        if retry_max_delay < retry_base_delay:
            raise ConfigurationError("retry_max_delay must be at least retry_base_delay")
        if retry_jitter < 0:
            raise ConfigurationError("retry_jitter must not be negative")
        for status in retry_statuses:
            if not 400 <= status < 600:
                raise ConfigurationError(f"retry status out of range: {status}")

        if base_url is not None:
            try:
                url = httpx.URL(base_url)
            except httpx.InvalidURL as err:
                raise ConfigurationError(f"Invalid base URL: {base_url!r}") from err
            if url.scheme not in ("http", "https") or not url.host:
                raise ConfigurationError(f"Invalid base URL: {base_url!r}")

        return cls(
            api_key=api_key,
            environment=Environment.parse(environment),
            base_url=base_url,
            timeout=float(timeout),
            max_retries=max_retries,
            retry_base_delay=float(retry_base_delay),
            retry_max_delay=float(retry_max_delay),
            retry_jitter=float(retry_jitter),
            retry_statuses=tuple(retry_statuses),
            retry_server_errors=retry_server_errors,
            webhook_secret=webhook_secret or None,
            debug=debug,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a configuration from XRPLSALE_* environment variables.

        Raises:
            ConfigurationError: If a variable is missing or malformed
        """
        env = os.environ if environ is None else environ

        def number(name: str, default: float) -> float:
            raw = env.get(name)
            if raw is None or raw == "":
                return default
            try:
                return float(raw)
            except ValueError as err:
                raise ConfigurationError(f"{name} must be a number, got {raw!r}") from err

        max_retries = number("XRPLSALE_MAX_RETRIES", DEFAULT_MAX_RETRIES)
        if max_retries != int(max_retries):
            raise ConfigurationError("XRPLSALE_MAX_RETRIES must be an integer")

        return cls.create(
            env.get("XRPLSALE_API_KEY", ""),
            environment=env.get("XRPLSALE_ENVIRONMENT") or Environment.PRODUCTION,
            base_url=env.get("XRPLSALE_BASE_URL") or None,
            timeout=number("XRPLSALE_TIMEOUT", DEFAULT_TIMEOUT),
            max_retries=int(max_retries),
            retry_base_delay=number("XRPLSALE_RETRY_DELAY", DEFAULT_RETRY_BASE_DELAY),
            webhook_secret=env.get("XRPLSALE_WEBHOOK_SECRET") or None,
            debug=env.get("XRPLSALE_DEBUG", "").lower() in ("1", "true", "yes", "on"),
        )
