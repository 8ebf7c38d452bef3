"""XRPL.Sale SDK - Python client for the XRPL.Sale token launchpad API."""

from .auth import AuthManager, AuthState
from .client import XRPLSaleClient
from .config import SDK_VERSION, ClientConfig, Environment
from .errors import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    InvalidSignatureError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RetriesExhaustedError,
    ServerError,
    SignatureError,
    TokenExpiredError,
    UnauthorizedError,
    WebhookPayloadError,
    XRPLSaleError,
)
from .pagination import Page, Paginator
from .retry import RetryPolicy, RetryState
from .signature import (
    SIGNATURE_HEADER,
    WebhookSignatureValidator,
    compute_signature,
    extract_webhook_signature,
    parse_event,
    verify_signature,
)
from .types import (
    AuthChallenge,
    AuthToken,
    ExportResult,
    Investment,
    InvestmentSimulation,
    InvestmentStatus,
    MarketTrends,
    PaginatedResponse,
    PaginationInfo,
    PlatformAnalytics,
    Project,
    ProjectAnalytics,
    ProjectStats,
    ProjectStatus,
    ProjectTier,
    SortOrder,
    TimeSeriesPoint,
    TrendPeriod,
    WebhookEvent,
    WebhookSubscription,
)

__version__ = SDK_VERSION

__all__ = [
    # Client
    "XRPLSaleClient",
    "ClientConfig",
    "Environment",
    "AuthManager",
    "AuthState",
    "RetryPolicy",
    "RetryState",
    "Page",
    "Paginator",
    # Types
    "Project",
    "ProjectStatus",
    "ProjectTier",
    "ProjectStats",
    "Investment",
    "InvestmentStatus",
    "InvestmentSimulation",
    "PlatformAnalytics",
    "ProjectAnalytics",
    "MarketTrends",
    "TimeSeriesPoint",
    "ExportResult",
    "WebhookSubscription",
    "WebhookEvent",
    "AuthChallenge",
    "AuthToken",
    "PaginatedResponse",
    "PaginationInfo",
    "SortOrder",
    "TrendPeriod",
    # Errors
    "XRPLSaleError",
    "ConfigurationError",
    "APIError",
    "BadRequestError",
    "UnauthorizedError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "NetworkError",
    "ParseError",
    "RetriesExhaustedError",
    "AuthenticationError",
    "TokenExpiredError",
    "SignatureError",
    "InvalidSignatureError",
    "WebhookPayloadError",
    # Signature
    "SIGNATURE_HEADER",
    "WebhookSignatureValidator",
    "compute_signature",
    "verify_signature",
    "parse_event",
    "extract_webhook_signature",
]
