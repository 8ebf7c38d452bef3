"""Projects service for managing token sale projects."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from .pagination import Page, Paginator
from .service import Service
from .types import (
    Investment,
    PaginatedResponse,
    Project,
    ProjectStats,
    ProjectStatus,
    ProjectTier,
    SortOrder,
    TrendPeriod,
    format_datetime,
)

Status = Union[ProjectStatus, str]


class ProjectsService(Service):
    """Create, launch and browse token sale projects."""

    async def list(
        self,
        *,
        status: Optional[Status] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[Union[SortOrder, str]] = None,
    ) -> PaginatedResponse[Project]:
        """
        List projects with optional filtering and pagination.

        Args:
            status: Filter by project status
            page: Page number (1-based)
            limit: Number of items per page
            sort_by: Field to sort by
            sort_order: Sort order (asc or desc)

        Returns:
            One page of projects
        """
        data = await self._request(
            "GET",
            "/projects",
            params={
                "status": status,
                "page": page,
                "limit": limit,
                "sort_by": sort_by,
                "sort_order": sort_order,
            },
        )
        return self._decode(PaginatedResponse.from_dict, data, Project.from_dict)

    async def active(
        self, *, page: Optional[int] = None, limit: Optional[int] = None
    ) -> PaginatedResponse[Project]:
        return await self.list(status=ProjectStatus.ACTIVE, page=page, limit=limit)

    async def upcoming(
        self, *, page: Optional[int] = None, limit: Optional[int] = None
    ) -> PaginatedResponse[Project]:
        return await self.list(status=ProjectStatus.UPCOMING, page=page, limit=limit)

    async def completed(
        self, *, page: Optional[int] = None, limit: Optional[int] = None
    ) -> PaginatedResponse[Project]:
        return await self.list(status=ProjectStatus.COMPLETED, page=page, limit=limit)

    def iter_all(
        self,
        *,
        status: Optional[Status] = None,
        page_size: int = 50,
        sort_by: Optional[str] = None,
        sort_order: Optional[Union[SortOrder, str]] = None,
    ) -> Paginator[Project]:
        """
        Iterate over all matching projects, fetching pages on demand.

        Example:
            ```python
            async for project in client.projects.iter_all(status="active"):
                print(project.name)
            ```
        """

        async def fetch(page: int) -> Page[Project]:
            response = await self.list(
                status=status,
                page=page,
                limit=page_size,
                sort_by=sort_by,
                sort_order=sort_order,
            )
            return Page.from_response(response)

        return Paginator(fetch)

    async def get(self, project_id: str) -> Project:
        """
        Get a project by ID.

        Args:
            project_id: The project ID
        """
        data = await self._request("GET", f"/projects/{project_id}")
        return self._decode(Project.from_dict, data)

    async def create(
        self,
        *,
        name: str,
        token_symbol: str,
        total_supply: str,
        tiers: list[ProjectTier],
        sale_start_date: datetime,
        sale_end_date: datetime,
        description: Optional[str] = None,
        website: Optional[str] = None,
        whitepaper_url: Optional[str] = None,
        social_links: Optional[dict[str, str]] = None,
    ) -> Project:
        """
        Create a new project.

        Args:
            name: Project name
            token_symbol: Ticker of the token being sold
            total_supply: Total token supply (decimal string)
            tiers: Pricing tiers of the sale
            sale_start_date: When the sale opens
            sale_end_date: When the sale closes
            description: Project description
            website: Project website
            whitepaper_url: Link to the whitepaper
            social_links: Social media links keyed by network

        Returns:
            The created project
        """
        body: dict[str, Any] = {
            "name": name,
            "token_symbol": token_symbol,
            "total_supply": total_supply,
            "tiers": [t.to_dict() for t in tiers],
            "sale_start_date": format_datetime(sale_start_date),
            "sale_end_date": format_datetime(sale_end_date),
        }
        if description:
            body["description"] = description
        if website:
            body["website"] = website
        if whitepaper_url:
            body["whitepaper_url"] = whitepaper_url
        if social_links:
            body["social_links"] = social_links

        data = await self._request("POST", "/projects", json=body)
        return self._decode(Project.from_dict, data)

    async def update(
        self,
        project_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        sale_start_date: Optional[datetime] = None,
        sale_end_date: Optional[datetime] = None,
        website: Optional[str] = None,
        whitepaper_url: Optional[str] = None,
        social_links: Optional[dict[str, str]] = None,
    ) -> Project:
        """
        Update an existing project. Only provided fields are changed.

        Args:
            project_id: The project ID
        """
        body: dict[str, Any] = {}
        if name is not None:
            body["name"] = name
        if description is not None:
            body["description"] = description
        if sale_start_date is not None:
            body["sale_start_date"] = format_datetime(sale_start_date)
        if sale_end_date is not None:
            body["sale_end_date"] = format_datetime(sale_end_date)
        if website is not None:
            body["website"] = website
        if whitepaper_url is not None:
            body["whitepaper_url"] = whitepaper_url
        if social_links is not None:
            body["social_links"] = social_links

        data = await self._request("PATCH", f"/projects/{project_id}", json=body)
        return self._decode(Project.from_dict, data)

    async def launch(self, project_id: str) -> Project:
        """Launch a project (make it active)."""
        data = await self._request("POST", f"/projects/{project_id}/launch")
        return self._decode(Project.from_dict, data)

    async def pause(self, project_id: str) -> Project:
        """Pause a project."""
        data = await self._request("POST", f"/projects/{project_id}/pause")
        return self._decode(Project.from_dict, data)

    async def resume(self, project_id: str) -> Project:
        """Resume a paused project."""
        data = await self._request("POST", f"/projects/{project_id}/resume")
        return self._decode(Project.from_dict, data)

    async def cancel(self, project_id: str) -> Project:
        """Cancel a project."""
        data = await self._request("POST", f"/projects/{project_id}/cancel")
        return self._decode(Project.from_dict, data)

    async def stats(self, project_id: str) -> ProjectStats:
        data = await self._request("GET", f"/projects/{project_id}/stats")
        return self._decode(ProjectStats.from_dict, data)

    async def investors(
        self,
        project_id: str,
        *,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> PaginatedResponse[Investment]:
        """
        List the investments made into a project.

        Args:
            project_id: The project ID
            page: Page number (1-based)
            limit: Number of items per page
        """
        data = await self._request(
            "GET",
            f"/projects/{project_id}/investors",
            params={"page": page, "limit": limit},
        )
        return self._decode(PaginatedResponse.from_dict, data, Investment.from_dict)

    async def tiers(self, project_id: str) -> list[ProjectTier]:
        data = await self._request("GET", f"/projects/{project_id}/tiers")
        return self._decode_list(ProjectTier.from_dict, data)

    async def update_tiers(
        self, project_id: str, tiers: list[ProjectTier]
    ) -> list[ProjectTier]:
        """Replace the tier configuration of a project."""
        data = await self._request(
            "PUT",
            f"/projects/{project_id}/tiers",
            json={"tiers": [t.to_dict() for t in tiers]},
        )
        return self._decode_list(ProjectTier.from_dict, data)

    async def search(
        self,
        query: str,
        *,
        status: Optional[Status] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> PaginatedResponse[Project]:
        """
        Search projects by name, symbol or description.

        Args:
            query: Search query
            status: Filter by status
            page: Page number (1-based)
            limit: Number of items per page
        """
        data = await self._request(
            "GET",
            "/projects/search",
            params={"q": query, "status": status, "page": page, "limit": limit},
        )
        return self._decode(PaginatedResponse.from_dict, data, Project.from_dict)

    async def featured(self, *, limit: Optional[int] = None) -> list[Project]:
        data = await self._request("GET", "/projects/featured", params={"limit": limit})
        return self._decode(PaginatedResponse.from_dict, data, Project.from_dict).data

    async def trending(
        self,
        *,
        period: Optional[Union[TrendPeriod, str]] = None,
        limit: Optional[int] = None,
    ) -> list[Project]:
        """
        Get trending projects.

        Args:
            period: Time period (24h, 7d, 30d)
            limit: Maximum number of projects to return
        """
        data = await self._request(
            "GET", "/projects/trending", params={"period": period, "limit": limit}
        )
        return self._decode(PaginatedResponse.from_dict, data, Project.from_dict).data
