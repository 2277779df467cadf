"""Concurrent enumeration across regions.

Each region gets its own `EnumerationDriver`; the drivers share nothing.
Records are merged into one sink, and the row ceiling and the sink's stop
signal are enforced here, across all regions.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import TypeVar

from pydantic import BaseModel

from reserved_dal.enumeration import EnumerationDriver, EnumerationResult
from reserved_dal.models.params import MAX_PAGE_SIZE
from reserved_dal.protocols import PageFetcher, RecordSink

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FanOutResult(BaseModel, frozen=True):
    """Summary of a multi-region enumeration."""

    regions: dict[str, EnumerationResult]
    """Per-region outcome, keyed by region name.

    A region's `records_emitted` counts records it offered to the merge,
    including the one rejected once the merge had already stopped.
    """

    forwarded: dict[str, int]
    """Records each region actually delivered to the merged sink."""

    records_emitted: int
    """Records forwarded to the merged sink."""


async def enumerate_regions(
    fetchers: Mapping[str, PageFetcher[T]],
    emit: RecordSink[T],
    *,
    filter: str | None = None,  # noqa: A002
    ceiling: int | None = None,
    max_page_size: int = MAX_PAGE_SIZE,
    stop_on_duplicate_token: bool = True,
) -> FanOutResult:
    """Enumerate every region concurrently into one sink.

    A region stops at its next emission once the sink asks to stop or the
    ceiling is reached globally. Records a region produces after that point
    are not forwarded.

    Raises:
        ExceptionGroup: If any region fails. Remaining regions are cancelled.
    """
    forwarded = dict.fromkeys(fetchers, 0)
    total = 0
    stopped = False

    def forward_for(region: str) -> Callable[[T], Awaitable[bool]]:
        async def forward(record: T) -> bool:
            nonlocal total, stopped
            if stopped or (ceiling is not None and total >= ceiling):
                stopped = True
                return False

            # Reserve the slot before awaiting the sink
            total += 1
            forwarded[region] += 1
            should_continue = emit(record)
            if inspect.isawaitable(should_continue):
                should_continue = await should_continue

            if should_continue is False or (ceiling is not None and total >= ceiling):
                stopped = True
            return not stopped

        return forward

    async with asyncio.TaskGroup() as tg:
        tasks = {
            region: tg.create_task(
                EnumerationDriver(
                    fetcher,
                    max_page_size=max_page_size,
                    stop_on_duplicate_token=stop_on_duplicate_token,
                ).run(forward_for(region), filter=filter, ceiling=ceiling),
                name=f"enumerate:{region}",
            )
            for region, fetcher in fetchers.items()
        }

    result = FanOutResult(
        regions={region: task.result() for region, task in tasks.items()},
        forwarded=forwarded,
        records_emitted=total,
    )
    logger.info(
        "fanout_complete",
        extra={"regions": len(result.regions), "records_emitted": result.records_emitted},
    )
    return result
