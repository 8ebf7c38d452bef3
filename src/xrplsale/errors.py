"""Error types for the XRPL.Sale SDK."""

from typing import Any, Optional


class XRPLSaleError(Exception):
    """Base error class for the XRPL.Sale SDK."""

    pass


class ConfigurationError(XRPLSaleError):
    """Invalid or missing client configuration."""

    pass


class APIError(XRPLSaleError):
    """Error returned by the XRPL.Sale API."""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.url = url

    def __str__(self) -> str:
        if self.code:
            return f"xrplsale: {self.message} (HTTP {self.status_code}, code: {self.code})"
        return f"xrplsale: {self.message} (HTTP {self.status_code})"

    @classmethod
    def from_response(
        cls,
        status_code: int,
        body: Any,
        *,
        url: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> "APIError":
        """
        Create the most specific error for an API response.

        Args:
            status_code: HTTP status of the response
            body: Decoded JSON body, or the raw text when it was not JSON
            url: Request URL, kept for diagnostics
            retry_after: Parsed Retry-After header (429 only)
        """
        if isinstance(body, dict):
            message = body.get("error") or body.get("message") or f"HTTP {status_code}"
            code = body.get("code")
            details = body.get("details")
        else:
            message = str(body) if body else f"HTTP {status_code}"
            code = None
            details = None

        if status_code in (401, 403):
            return UnauthorizedError(message, status_code, code, details, url)
        if status_code == 404:
            return NotFoundError(message, status_code, code, details, url)
        if status_code == 429:
            return RateLimitError(
                message, status_code, code, details, url, retry_after=retry_after
            )
        if status_code >= 500:
            return ServerError(message, status_code, code, details, url)
        if 400 <= status_code < 500:
            return BadRequestError(message, status_code, code, details, url)
        return cls(message, status_code, code, details, url)

    def is_unauthorized(self) -> bool:
        """Check if this is an authorization error."""
        return self.status_code in (401, 403)

    def is_not_found(self) -> bool:
        """Check if this is a not found error."""
        return self.status_code == 404

    def is_rate_limited(self) -> bool:
        """Check if this is a rate limit error."""
        return self.status_code == 429

    def is_bad_request(self) -> bool:
        """Check if this is a validation error."""
        return self.status_code in (400, 422)

    def is_server_error(self) -> bool:
        """Check if this is a server error."""
        return self.status_code >= 500


class BadRequestError(APIError):
    """The request was rejected as invalid (4xx)."""

    pass


class UnauthorizedError(APIError):
    """Missing or invalid credentials (401/403)."""

    pass


class NotFoundError(APIError):
    """The requested resource does not exist (404)."""

    pass


class RateLimitError(APIError):
    """Too many requests (429)."""

    def __init__(
        self,
        message: str,
        status_code: int = 429,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        url: Optional[str] = None,
        *,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message, status_code, code, details, url)
        self.retry_after = retry_after


class ServerError(APIError):
    """The API failed to handle the request (5xx)."""

    pass


class NetworkError(XRPLSaleError):
    """The request could not be completed at the transport level."""

    pass


class ParseError(XRPLSaleError):
    """A successful response could not be decoded."""

    pass


class RetriesExhaustedError(XRPLSaleError):
    """All retry attempts failed."""

    def __init__(self, last_error: Exception, attempts: int, total_delay: float) -> None:
        super().__init__(f"Request failed after {attempts} attempts: {last_error}")
        self.last_error = last_error
        self.attempts = attempts
        self.total_delay = total_delay


class AuthenticationError(XRPLSaleError):
    """Wallet authentication could not proceed."""

    pass


class TokenExpiredError(AuthenticationError):
    """The session token expired and cannot be refreshed automatically."""

    def __init__(self) -> None:
        super().__init__("Authentication token expired; re-authenticate or configure a signer")


class SignatureError(XRPLSaleError):
    """Error during webhook signature verification."""

    pass


class InvalidSignatureError(SignatureError):
    """Signature does not match."""

    def __init__(self) -> None:
        super().__init__("Signature mismatch")


class WebhookPayloadError(SignatureError):
    """Webhook body is not a valid event."""

    pass
