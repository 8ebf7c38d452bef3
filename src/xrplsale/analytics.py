"""Analytics service."""

from datetime import date, datetime
from typing import Optional, Union

from .service import Service
from .types import (
    ExportResult,
    MarketTrends,
    PlatformAnalytics,
    ProjectAnalytics,
    TrendPeriod,
)

DateLike = Union[datetime, date]


class AnalyticsService(Service):
    """Platform and project statistics."""

    async def platform(
        self,
        *,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> PlatformAnalytics:
        """
        Get platform-wide statistics.

        Args:
            start_date: Start of the period (inclusive)
            end_date: End of the period (inclusive)
        """
        data = await self._request(
            "GET",
            "/analytics/platform",
            params={"start_date": start_date, "end_date": end_date},
        )
        return self._decode(PlatformAnalytics.from_dict, data)

    async def project(
        self,
        project_id: str,
        *,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> ProjectAnalytics:
        """
        Get funding analytics for one project.

        Args:
            project_id: The project ID
            start_date: Start of the period (inclusive)
            end_date: End of the period (inclusive)
        """
        data = await self._request(
            "GET",
            f"/analytics/projects/{project_id}",
            params={"start_date": start_date, "end_date": end_date},
        )
        return self._decode(ProjectAnalytics.from_dict, data)

    async def market_trends(
        self, *, period: Union[TrendPeriod, str] = TrendPeriod.WEEK
    ) -> MarketTrends:
        data = await self._request(
            "GET", "/analytics/market-trends", params={"period": period}
        )
        return self._decode(MarketTrends.from_dict, data)

    async def export(
        self,
        *,
        data_type: str,
        format: str = "csv",
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        project_id: Optional[str] = None,
    ) -> ExportResult:
        """
        Generate a downloadable analytics export.

        Args:
            data_type: What to export (e.g. "investments", "projects")
            format: File format, "csv" or "json"
            start_date: Start of the period (inclusive)
            end_date: End of the period (inclusive)
            project_id: Restrict the export to one project

        Returns:
            Where to download the export
        """
        data = await self._request(
            "GET",
            "/analytics/export",
            params={
                "type": data_type,
                "format": format,
                "start_date": start_date,
                "end_date": end_date,
                "project_id": project_id,
            },
        )
        return self._decode(ExportResult.from_dict, data)
