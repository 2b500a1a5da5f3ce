from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar


PAGE_SIZE = 1000
logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[int], Awaitable[Sequence[T]]]


def advance_cursor(
    page: Sequence[T],
    *,
    timestamp_of: Callable[[T], int],
    page_size: int = PAGE_SIZE,
) -> int | None:
    """Return the lower bound for the next page, or None when the stream is exhausted.

    The next cursor is one second past the last record of the page. Records that
    share that last timestamp but did not fit in the page are never requested
    again, so a stream can silently lose rows when more than ``page_size``
    records carry the same timestamp across a page boundary.
    """
    if not page:
        return None
    if len(page) < page_size:
        return None
    return timestamp_of(page[-1]) + 1


def boundary_overflow_risk(
    page: Sequence[T],
    *,
    timestamp_of: Callable[[T], int],
    page_size: int = PAGE_SIZE,
) -> bool:
    if len(page) < page_size or len(page) < 2:
        return False
    return timestamp_of(page[-1]) == timestamp_of(page[-2])


async def paginate_by_timestamp(
    fetch_page: PageFetcher[T],
    *,
    start_timestamp: int,
    timestamp_of: Callable[[T], int],
    page_size: int = PAGE_SIZE,
    entity: str = "records",
) -> list[T]:
    result: list[T] = []
    cursor: int | None = start_timestamp
    pages = 0

    while cursor is not None:
        page = await fetch_page(cursor)
        pages += 1
        if not page:
            break

        result.extend(page)
        logger.info(
            "pagination: fetched_page entity=%s page=%s size=%s total=%s cursor=%s",
            entity,
            pages,
            len(page),
            len(result),
            cursor,
        )

        if boundary_overflow_risk(page, timestamp_of=timestamp_of, page_size=page_size):
            logger.warning(
                "pagination: boundary_timestamp_shared entity=%s timestamp=%s "
                "rows sharing it beyond this page are skipped",
                entity,
                timestamp_of(page[-1]),
            )
        cursor = advance_cursor(page, timestamp_of=timestamp_of, page_size=page_size)

    logger.info(
        "pagination: exhausted entity=%s pages=%s total=%s start=%s",
        entity,
        pages,
        len(result),
        start_timestamp,
    )
    return result
