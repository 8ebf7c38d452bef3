"""Type definitions for the XRPL.Sale SDK."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as returned by the API."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_datetime(value: Union[datetime, date]) -> str:
    """Format a date or datetime for query parameters and request bodies."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat().replace("+00:00", "Z")
    return value.isoformat()


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    DRAFT = "draft"
    UPCOMING = "upcoming"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvestmentStatus(str, Enum):
    """Status of an investment."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    REFUNDED = "refunded"


class SortOrder(str, Enum):
    """Sort direction for list queries."""

    ASC = "asc"
    DESC = "desc"


class TrendPeriod(str, Enum):
    """Time window for trending and market queries."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"


@dataclass
class ProjectTier:
    """A pricing tier of a token sale."""

    tier: int
    price_per_token: str
    total_tokens: str
    tokens_sold: str = "0"
    min_investment: Optional[str] = None
    max_investment: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectTier":
        """Create from API response dict."""
        return cls(
            tier=data["tier"],
            price_per_token=str(data["price_per_token"]),
            total_tokens=str(data["total_tokens"]),
            tokens_sold=str(data.get("tokens_sold", "0")),
            min_investment=data.get("min_investment"),
            max_investment=data.get("max_investment"),
            starts_at=parse_datetime(data.get("starts_at")),
            ends_at=parse_datetime(data.get("ends_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for request bodies."""
        body: dict[str, Any] = {
            "tier": self.tier,
            "price_per_token": self.price_per_token,
            "total_tokens": self.total_tokens,
        }
        if self.min_investment is not None:
            body["min_investment"] = self.min_investment
        if self.max_investment is not None:
            body["max_investment"] = self.max_investment
        if self.starts_at is not None:
            body["starts_at"] = format_datetime(self.starts_at)
        if self.ends_at is not None:
            body["ends_at"] = format_datetime(self.ends_at)
        return body


@dataclass
class Project:
    """A token sale project."""

    id: str
    name: str
    token_symbol: str
    status: ProjectStatus
    total_supply: str
    created_at: datetime
    description: Optional[str] = None
    sale_start_date: Optional[datetime] = None
    sale_end_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    total_raised: Optional[str] = None
    website: Optional[str] = None
    whitepaper_url: Optional[str] = None
    social_links: Optional[dict[str, str]] = None
    tiers: list[ProjectTier] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            name=data["name"],
            token_symbol=data["token_symbol"],
            status=ProjectStatus(data["status"]),
            total_supply=str(data["total_supply"]),
            created_at=parse_datetime(data["created_at"]),
            description=data.get("description"),
            sale_start_date=parse_datetime(data.get("sale_start_date")),
            sale_end_date=parse_datetime(data.get("sale_end_date")),
            updated_at=parse_datetime(data.get("updated_at")),
            total_raised=data.get("total_raised"),
            website=data.get("website"),
            whitepaper_url=data.get("whitepaper_url"),
            social_links=data.get("social_links"),
            tiers=[ProjectTier.from_dict(t) for t in data.get("tiers", [])],
        )


@dataclass
class ProjectStats:
    """Funding statistics for a project."""

    project_id: str
    total_raised: str
    total_investors: int
    tokens_sold: str
    progress_percentage: float
    current_tier: Optional[int] = None
    average_investment: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectStats":
        """Create from API response dict."""
        return cls(
            project_id=data["project_id"],
            total_raised=str(data["total_raised"]),
            total_investors=data["total_investors"],
            tokens_sold=str(data["tokens_sold"]),
            progress_percentage=float(data.get("progress_percentage", 0.0)),
            current_tier=data.get("current_tier"),
            average_investment=data.get("average_investment"),
        )


@dataclass
class Investment:
    """An investment into a project."""

    id: str
    project_id: str
    investor_account: str
    amount_xrp: str
    status: InvestmentStatus
    created_at: datetime
    token_amount: Optional[str] = None
    tier: Optional[int] = None
    transaction_hash: Optional[str] = None
    confirmed_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Investment":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            project_id=data["project_id"],
            investor_account=data["investor_account"],
            amount_xrp=str(data["amount_xrp"]),
            status=InvestmentStatus(data["status"]),
            created_at=parse_datetime(data["created_at"]),
            token_amount=data.get("token_amount"),
            tier=data.get("tier"),
            transaction_hash=data.get("transaction_hash"),
            confirmed_at=parse_datetime(data.get("confirmed_at")),
        )


@dataclass
class InvestmentSimulation:
    """Projected outcome of a hypothetical investment."""

    project_id: str
    amount_xrp: str
    token_amount: str
    price_per_token: str
    tier: Optional[int] = None
    fees: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InvestmentSimulation":
        """Create from API response dict."""
        return cls(
            project_id=data["project_id"],
            amount_xrp=str(data["amount_xrp"]),
            token_amount=str(data["token_amount"]),
            price_per_token=str(data["price_per_token"]),
            tier=data.get("tier"),
            fees=data.get("fees"),
        )


@dataclass
class TimeSeriesPoint:
    """A single data point in a time series."""

    timestamp: datetime
    value: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeSeriesPoint":
        """Create from API response dict."""
        return cls(
            timestamp=parse_datetime(data["timestamp"]),
            value=float(data["value"]),
        )


@dataclass
class PlatformAnalytics:
    """Platform-wide statistics."""

    total_projects: int
    active_projects: int
    total_raised: str
    total_investors: int
    total_investments: int = 0
    success_rate: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlatformAnalytics":
        """Create from API response dict."""
        return cls(
            total_projects=data["total_projects"],
            active_projects=data["active_projects"],
            total_raised=str(data["total_raised"]),
            total_investors=data["total_investors"],
            total_investments=data.get("total_investments", 0),
            success_rate=data.get("success_rate"),
        )


@dataclass
class ProjectAnalytics:
    """Funding analytics for one project over a period."""

    project_id: str
    total_raised: str
    unique_investors: int
    funding_over_time: list[TimeSeriesPoint] = field(default_factory=list)
    investors_over_time: list[TimeSeriesPoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectAnalytics":
        """Create from API response dict."""
        return cls(
            project_id=data["project_id"],
            total_raised=str(data["total_raised"]),
            unique_investors=data["unique_investors"],
            funding_over_time=[
                TimeSeriesPoint.from_dict(p) for p in data.get("funding_over_time", [])
            ],
            investors_over_time=[
                TimeSeriesPoint.from_dict(p) for p in data.get("investors_over_time", [])
            ],
        )


@dataclass
class MarketTrends:
    """Aggregate market activity for a period."""

    period: str
    total_volume: str
    new_projects: int
    new_investors: int
    volume_over_time: list[TimeSeriesPoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MarketTrends":
        """Create from API response dict."""
        return cls(
            period=data["period"],
            total_volume=str(data["total_volume"]),
            new_projects=data["new_projects"],
            new_investors=data["new_investors"],
            volume_over_time=[
                TimeSeriesPoint.from_dict(p) for p in data.get("volume_over_time", [])
            ],
        )


@dataclass
class ExportResult:
    """A generated analytics export."""

    download_url: str
    format: str
    expires_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExportResult":
        """Create from API response dict."""
        return cls(
            download_url=data["download_url"],
            format=data.get("format", "csv"),
            expires_at=parse_datetime(data.get("expires_at")),
        )


@dataclass
class WebhookSubscription:
    """A registered webhook endpoint."""

    id: str
    url: str
    events: list[str]
    active: bool
    created_at: datetime
    description: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WebhookSubscription":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            url=data["url"],
            events=list(data.get("events", [])),
            active=data.get("active", True),
            created_at=parse_datetime(data["created_at"]),
            description=data.get("description"),
            updated_at=parse_datetime(data.get("updated_at")),
        )


@dataclass
class AuthChallenge:
    """A challenge to be signed by a wallet."""

    challenge: str
    wallet_address: str
    timestamp: int
    expires_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], wallet_address: str) -> "AuthChallenge":
        """Create from API response dict."""
        return cls(
            challenge=data["challenge"],
            wallet_address=data.get("wallet_address", wallet_address),
            timestamp=int(data["timestamp"]),
            expires_at=parse_datetime(data.get("expires_at")),
        )


@dataclass(frozen=True)
class AuthToken:
    """A session token issued after wallet authentication."""

    token: str
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime, leeway: float = 0.0) -> bool:
        """Check whether the token is expired (or within `leeway` seconds of it)."""
        if self.expires_at is None:
            return False
        return (self.expires_at - now).total_seconds() <= leeway

    @classmethod
    def from_dict(cls, data: dict[str, Any], now: datetime) -> "AuthToken":
        """Create from API response dict; accepts expires_at or expires_in."""
        expires_at = parse_datetime(data.get("expires_at"))
        if expires_at is None and data.get("expires_in") is not None:
            expires_at = datetime.fromtimestamp(
                now.timestamp() + float(data["expires_in"]), tz=timezone.utc
            )
        return cls(token=data["token"], expires_at=expires_at)


@dataclass(frozen=True)
class WebhookEvent:
    """An inbound webhook notification."""

    event_type: str
    data: Any
    timestamp: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WebhookEvent":
        """Create from a decoded webhook body."""
        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool):
            raise TypeError("timestamp must be a string or a number")
        if isinstance(timestamp, (int, float)):
            parsed = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        elif timestamp is None or isinstance(timestamp, str):
            parsed = parse_datetime(timestamp)
        else:
            raise TypeError(
                f"timestamp must be a string or a number, not {type(timestamp).__name__}"
            )
        return cls(
            event_type=data["event_type"],
            data=data.get("data"),
            timestamp=parsed,
            id=data.get("id"),
        )


@dataclass
class PaginationInfo:
    """Pagination metadata of a list response."""

    page: int
    limit: int
    total: int
    total_pages: int

    @property
    def has_more(self) -> bool:
        """Whether pages after this one exist."""
        return self.page < self.total_pages

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaginationInfo":
        """Create from API response dict."""
        return cls(
            page=data["page"],
            limit=data["limit"],
            total=data["total"],
            total_pages=data["total_pages"],
        )


@dataclass
class PaginatedResponse(Generic[T]):
    """One page of a list endpoint."""

    data: list[T]
    pagination: Optional[PaginationInfo] = None

    @property
    def has_more(self) -> bool:
        """Whether another page should be requested."""
        return self.pagination is not None and self.pagination.has_more

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], item: Callable[[dict[str, Any]], T]
    ) -> "PaginatedResponse[T]":
        """Create from API response dict, building each item with `item`."""
        items = data["data"]
        if not isinstance(items, list):
            raise TypeError(f"data must be a list, not {type(items).__name__}")
        pagination = None
        if data.get("pagination"):
            pagination = PaginationInfo.from_dict(data["pagination"])
        return cls(
            data=[item(d) for d in items],
            pagination=pagination,
        )
