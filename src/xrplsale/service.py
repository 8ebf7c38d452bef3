"""Shared plumbing for resource services."""

from typing import TYPE_CHECKING, Any, Callable, TypeVar

from .errors import ParseError

if TYPE_CHECKING:
    from .client import XRPLSaleClient

T = TypeVar("T")


class Service:
    """Base class for services bound to a client."""

    def __init__(self, client: "XRPLSaleClient") -> None:
        self._client = client

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        return await self._client.request(method, path, **kwargs)

    @staticmethod
    def _decode(factory: Callable[..., T], data: Any, *args: Any) -> T:
        """Build a model, reporting malformed payloads as ParseError."""
        try:
            return factory(data, *args)
        except (KeyError, TypeError, ValueError, AttributeError) as err:
            raise ParseError(f"Unexpected response shape: {err!r}") from err

    @classmethod
    def _decode_list(
        cls, factory: Callable[[Any], T], data: Any, *, envelope: bool = False
    ) -> list[T]:
        """Build a model per element of a JSON array (or a {"data": [...]} envelope)."""
        if envelope and isinstance(data, dict) and "data" in data:
            data = data["data"]
        if not isinstance(data, list):
            raise ParseError(f"Expected a list in response, got {type(data).__name__}")
        return [cls._decode(factory, item) for item in data]
