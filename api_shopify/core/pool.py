import asyncio
from typing import Any, Awaitable, Callable, Iterable


async def gather_bounded(
    factories: Iterable[Callable[[], Awaitable[Any]]], limit: int
) -> list[Any]:
    """
    Run coroutine factories concurrently with at most `limit` of them in flight.

    Results are returned in submission order, whatever the completion order.
    The first exception propagates, like asyncio.gather.
    """
    semaphore = asyncio.Semaphore(limit)

    async def _run_with_limit(factory: Callable[[], Awaitable[Any]]) -> Any:
        async with semaphore:
            return await factory()

    return await asyncio.gather(*(_run_with_limit(factory) for factory in factories))
