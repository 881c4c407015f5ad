from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias, TypeVar

from loguru import logger

from cirrus.types import Page, Pagination

T = TypeVar("T")

PageFetcher: TypeAlias = Callable[[int], Awaitable[Page[T]]]


def parse_page(payload: dict[str, Any] | None, key: str = "data") -> Page[Any]:
    """Build a ``Page`` from ``{data: [...], pagination: {...}}``."""
    payload = payload or {}
    return Page(
        items=list(payload.get(key) or []),
        pagination=Pagination.from_dict(payload.get("pagination")),
    )


async def collect_pages(fetch_page: PageFetcher[T]) -> list[T]:
    """Walk every page starting at 1 and return all items in order.

    Stops at ``last_page`` or at the first empty page, whichever comes
    first. A failing page aborts the walk; nothing partial is returned.
    """
    items: list[T] = []
    page = 1
    while True:
        result = await fetch_page(page)
        items.extend(result.items)
        if page >= result.pagination.last_page or not result.items:
            break
        page += 1

    logger.bind(component="pagination").debug(
        "Collected {count} item(s) over {pages} page(s)", count=len(items), pages=page
    )
    return items
