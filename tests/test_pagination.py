"""Tests for the pagination cursor."""

from typing import Union

import pytest

from xrplsale import NetworkError, Page, PaginatedResponse, PaginationInfo, Paginator


class PageSource:
    """Serves canned pages and records which page numbers were requested."""

    def __init__(self, pages: list[Union[Page[str], Exception]]) -> None:
        self.pages = pages
        self.requested: list[int] = []

    async def __call__(self, number: int) -> Page[str]:
        self.requested.append(number)
        page = self.pages[number - 1]
        if isinstance(page, Exception):
            raise page
        return page


class TestPaginator:
    @pytest.mark.asyncio
    async def test_yields_items_across_pages(self) -> None:
        source = PageSource([Page(["a", "b"], has_more=True), Page(["c"], has_more=False)])

        items = [item async for item in Paginator(source)]

        assert items == ["a", "b", "c"]
        assert source.requested == [1, 2]

    @pytest.mark.asyncio
    async def test_failure_is_terminal(self) -> None:
        error = NetworkError("connection reset")
        source = PageSource([Page(["a", "b"], has_more=True), error, Page(["c"])])
        iterator = Paginator(source).__aiter__()

        assert await iterator.__anext__() == "a"
        assert await iterator.__anext__() == "b"
        with pytest.raises(NetworkError) as exc_info:
            await iterator.__anext__()
        assert exc_info.value is error

        with pytest.raises(StopAsyncIteration):
            await iterator.__anext__()
        assert source.requested == [1, 2]

    @pytest.mark.asyncio
    async def test_fetches_pages_on_demand(self) -> None:
        source = PageSource([Page(["a", "b"], has_more=True), Page(["c"], has_more=False)])
        iterator = Paginator(source).__aiter__()

        await iterator.__anext__()
        assert source.requested == [1]
        await iterator.__anext__()
        assert source.requested == [1]
        assert await iterator.__anext__() == "c"
        assert source.requested == [1, 2]

    @pytest.mark.asyncio
    async def test_each_iteration_restarts(self) -> None:
        source = PageSource([Page(["a"], has_more=True), Page(["b"], has_more=False)])
        paginator = Paginator(source)

        assert await paginator.collect() == ["a", "b"]
        assert await paginator.collect() == ["a", "b"]
        assert source.requested == [1, 2, 1, 2]

    @pytest.mark.asyncio
    async def test_empty_page_ends_iteration(self) -> None:
        source = PageSource([Page(["a"], has_more=True), Page([], has_more=True)])

        assert await Paginator(source).collect() == ["a"]
        assert source.requested == [1, 2]

    @pytest.mark.asyncio
    async def test_start_page(self) -> None:
        source = PageSource([Page(["a"], has_more=True), Page(["b"], has_more=False)])

        assert await Paginator(source, start_page=2).collect() == ["b"]

    def test_rejects_invalid_start_page(self) -> None:
        with pytest.raises(ValueError):
            Paginator(PageSource([]), start_page=0)

    @pytest.mark.asyncio
    async def test_pages(self) -> None:
        source = PageSource([Page(["a", "b"], has_more=True), Page(["c"], has_more=False)])

        pages = [page.items async for page in Paginator(source).pages()]

        assert pages == [["a", "b"], ["c"]]


class TestPageFromResponse:
    def test_has_more_until_last_page(self) -> None:
        first = PaginatedResponse(["a", "b"], PaginationInfo(page=1, limit=2, total=3, total_pages=2))
        last = PaginatedResponse(["c"], PaginationInfo(page=2, limit=2, total=3, total_pages=2))

        assert Page.from_response(first).has_more is True
        assert Page.from_response(last).has_more is False

    def test_missing_pagination_means_single_page(self) -> None:
        assert Page.from_response(PaginatedResponse(["a"])).has_more is False
