"""Lazy iteration over paged list endpoints."""

from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Generic, TypeVar

from .types import PaginatedResponse

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """A page of items and whether another page follows."""

    items: list[T] = field(default_factory=list)
    has_more: bool = False

    @classmethod
    def from_response(cls, response: PaginatedResponse[T]) -> "Page[T]":
        return cls(items=list(response.data), has_more=response.has_more)


FetchPage = Callable[[int], Awaitable[Page[T]]]


class Paginator(Generic[T]):
    """
    Async iterable over every item of a paged endpoint.

    Pages are requested one at a time, only once the items of the previous
    page have been consumed. Each `async for` starts over from `start_page`.
    If fetching a page fails, the error is raised after the items of earlier
    pages have been yielded and the iteration ends.

    Example:
        ```python
        async for project in client.projects.iter_all(status="active"):
            print(project.name)
        ```
    """

    def __init__(self, fetch_page: FetchPage[T], *, start_page: int = 1) -> None:
        if start_page < 1:
            raise ValueError("start_page must be >= 1")
        self._fetch_page = fetch_page
        self._start_page = start_page

    def __aiter__(self) -> AsyncIterator[T]:
        return self._items()

    async def pages(self) -> AsyncIterator[Page[T]]:
        """Iterate over whole pages instead of items."""
        number = self._start_page
        while True:
            page = await self._fetch_page(number)
            yield page
            # an empty page claiming more would loop forever
            if not page.has_more or not page.items:
                return
            number += 1

    async def _items(self) -> AsyncIterator[T]:
        async for page in self.pages():
            for item in page.items:
                yield item

    async def collect(self) -> list[T]:
        """Fetch every page and return all items."""
        return [item async for item in self]
