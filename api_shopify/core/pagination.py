"""
Aggregation of a paginated remote collection into one ordered list.

The remote collection is counted first, then every page is fetched
concurrently and the pages are flattened back in page order.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Protocol

from .. import config
from .pool import gather_bounded

logger = logging.getLogger(__name__)


class PaginatedResource(Protocol):
    async def count(self) -> int: ...

    async def list(self, params: dict | None = None) -> list[dict]: ...


@dataclass(frozen=True)
class PaginationPlan:
    total_count: int
    page_size: int
    page_count: int

    @property
    def pages(self) -> range:
        return range(1, self.page_count + 1)


@dataclass(frozen=True)
class Page:
    index: int
    items: tuple


def plan_pages(total_count: int, page_size: int) -> PaginationPlan:
    # an empty collection still gets one page, the empty first page is the valid result
    page_count = max(1, math.ceil(total_count / page_size))
    return PaginationPlan(total_count=total_count, page_size=page_size, page_count=page_count)


async def fetch_pages(
    resource: PaginatedResource, plan: PaginationPlan, limit: int
) -> list[Page]:
    async def _fetch(index: int) -> Page:
        logger.debug(f"fetching page {index}/{plan.page_count}")
        items = await resource.list({"limit": plan.page_size, "page": index})
        return Page(index=index, items=tuple(items))

    return await gather_bounded(
        [lambda index=index: _fetch(index) for index in plan.pages], limit
    )


def flatten(pages: list[Page]) -> list[Any]:
    return [item for page in sorted(pages, key=lambda p: p.index) for item in page.items]


class PaginatedAggregator:
    """Fetches a whole resource collection without pagination.

    A failure of the count or of any page fails the whole aggregation,
    a partial collection is never returned.
    """

    def __init__(self, page_size: int | None = None, limit: int | None = None):
        self.page_size = page_size or config.PAGE_SIZE
        self.limit = limit or config.CONCURRENCY_LIMIT

    async def aggregate(self, resource: PaginatedResource) -> list[Any]:
        total_count = await resource.count()
        plan = plan_pages(total_count, self.page_size)
        logger.debug(f"count {plan.total_count}, pages {plan.page_count}")
        pages = await fetch_pages(resource, plan, self.limit)
        return flatten(pages)
