"""
Collaborator call guards.

Any exception from a catalog, interaction-history or analysis collaborator is
re-raised as DataFetchError. Cancellation is not an Exception and passes through.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, TypeVar

from ..errors import DataFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def guarded(operation: str, awaitable: Awaitable[T]) -> T:
    """Await one collaborator call, wrapping failures in DataFetchError."""
    try:
        return await awaitable
    except DataFetchError:
        raise
    except Exception as e:
        logger.warning("[fetch] DATA_FETCH_FAILED operation=%s error=%s", operation, e)
        raise DataFetchError(operation, str(e)) from e


async def gather_all(*awaitables: Awaitable[Any]) -> List[Any]:
    """
    Run independent fetches concurrently.

    If one fails, the others are cancelled before the error propagates so no
    lookup outlives the request.
    """
    tasks = [asyncio.ensure_future(a) for a in awaitables]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        raise
