"""Investments service."""

from __future__ import annotations

from typing import Any, Optional, Union

from .pagination import Page, Paginator
from .service import Service
from .types import (
    Investment,
    InvestmentSimulation,
    InvestmentStatus,
    PaginatedResponse,
)

Status = Union[InvestmentStatus, str]


class InvestmentsService(Service):
    """Record and track investments into token sales."""

    async def list(
        self,
        *,
        project_id: Optional[str] = None,
        investor_account: Optional[str] = None,
        status: Optional[Status] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> PaginatedResponse[Investment]:
        """
        List investments with optional filtering and pagination.

        Args:
            project_id: Only investments into this project
            investor_account: Only investments from this XRPL account
            status: Filter by investment status
            page: Page number (1-based)
            limit: Number of items per page
        """
        data = await self._request(
            "GET",
            "/investments",
            params={
                "project_id": project_id,
                "investor_account": investor_account,
                "status": status,
                "page": page,
                "limit": limit,
            },
        )
        return self._decode(PaginatedResponse.from_dict, data, Investment.from_dict)

    def iter_all(
        self,
        *,
        project_id: Optional[str] = None,
        investor_account: Optional[str] = None,
        status: Optional[Status] = None,
        page_size: int = 50,
    ) -> Paginator[Investment]:
        """Iterate over all matching investments, fetching pages on demand."""

        async def fetch(page: int) -> Page[Investment]:
            response = await self.list(
                project_id=project_id,
                investor_account=investor_account,
                status=status,
                page=page,
                limit=page_size,
            )
            return Page.from_response(response)

        return Paginator(fetch)

    async def get(self, investment_id: str) -> Investment:
        data = await self._request("GET", f"/investments/{investment_id}")
        return self._decode(Investment.from_dict, data)

    async def create(
        self,
        *,
        project_id: str,
        amount_xrp: str,
        investor_account: str,
        transaction_hash: Optional[str] = None,
    ) -> Investment:
        """
        Record an investment.

        Args:
            project_id: The project being invested in
            amount_xrp: Amount in XRP (decimal string)
            investor_account: XRPL account of the investor
            transaction_hash: Hash of the payment transaction, if already submitted

        Returns:
            The created investment
        """
        body: dict[str, Any] = {
            "project_id": project_id,
            "amount_xrp": amount_xrp,
            "investor_account": investor_account,
        }
        if transaction_hash:
            body["transaction_hash"] = transaction_hash

        data = await self._request("POST", "/investments", json=body)
        return self._decode(Investment.from_dict, data)

    async def by_project(
        self,
        project_id: str,
        *,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> PaginatedResponse[Investment]:
        return await self.list(project_id=project_id, page=page, limit=limit)

    async def by_investor(
        self,
        investor_account: str,
        *,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> PaginatedResponse[Investment]:
        return await self.list(investor_account=investor_account, page=page, limit=limit)

    async def simulate(self, project_id: str, amount_xrp: str) -> InvestmentSimulation:
        """
        Preview the tokens an investment would buy at current tier prices.

        Args:
            project_id: The project ID
            amount_xrp: Amount in XRP (decimal string)
        """
        data = await self._request(
            "POST",
            "/investments/simulate",
            json={"project_id": project_id, "amount_xrp": amount_xrp},
        )
        return self._decode(InvestmentSimulation.from_dict, data)
