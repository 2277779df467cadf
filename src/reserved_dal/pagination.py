"""Page sizing and token-based page sequencing.

`resolve_page_size` turns a caller's row ceiling into the page size sent to
the remote API. `Paginator` walks the continuation tokens of a `PageFetcher`
one page at a time and refuses to follow a token it has already used.
"""

import logging
from collections.abc import AsyncIterator
from typing import ClassVar, Generic, TypeVar

from reserved_dal.errors import DalError, ErrorKind
from reserved_dal.models.contexts import PageContext
from reserved_dal.models.datatypes import Page
from reserved_dal.models.params import MAX_PAGE_SIZE, MIN_PAGE_SIZE, PageRequest
from reserved_dal.protocols import PageFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_page_size(ceiling: int | None, max_page_size: int = MAX_PAGE_SIZE) -> int:
    """Pick the page size for an enumeration bounded by `ceiling` rows.

    Args:
        ceiling: Maximum number of rows the caller wants (None = unbounded)
        max_page_size: Largest page to request

    Returns:
        `max_page_size` unless the ceiling is smaller, in which case the
        ceiling itself, but never less than `MIN_PAGE_SIZE`.
    """
    page_size = max_page_size
    if ceiling is not None and ceiling < page_size:
        page_size = MIN_PAGE_SIZE if ceiling < MIN_PAGE_SIZE else ceiling
    return page_size


class Paginator(Generic[T]):
    """Sequences page fetches by continuation token.

    The first page is always requested. Later pages are requested only
    while the previous page reported more and handed back a token. With
    `stop_on_duplicate_token`, a page whose token was already used ends
    the sequence instead of fetching the same page again.
    """

    __slots__: ClassVar[tuple[str, ...]] = (
        "_ctx",
        "_done",
        "_duplicate",
        "_fetcher",
        "_pages",
        "_request",
        "_seen",
        "_stop_on_duplicate_token",
    )

    _ctx: PageContext
    _done: bool
    _duplicate: bool
    _fetcher: PageFetcher[T]
    _pages: int
    _request: PageRequest
    _seen: set[str]
    _stop_on_duplicate_token: bool

    def __init__(
        self,
        fetcher: PageFetcher[T],
        request: PageRequest,
        *,
        ctx: PageContext | None = None,
        stop_on_duplicate_token: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._request = request
        self._ctx = ctx or PageContext()
        self._stop_on_duplicate_token = stop_on_duplicate_token
        self._done = False
        self._duplicate = False
        self._pages = 0
        self._seen = set()

    @property
    def has_more_pages(self) -> bool:
        """Whether `next_page` may be called again."""
        return not self._done

    @property
    def pages_fetched(self) -> int:
        return self._pages

    @property
    def stopped_on_duplicate_token(self) -> bool:
        return self._duplicate

    async def next_page(self) -> Page[T]:
        """Fetch the next page and advance the continuation state.

        Raises:
            DalError: If the sequence has already ended.
        """
        if self._done:
            msg = "No more pages available"
            raise DalError(msg, kind=ErrorKind.INVALID_INPUT)

        if self._ctx.token:
            self._seen.add(self._ctx.token)

        page = await self._fetcher.fetch_page(self._request, self._ctx)
        self._pages += 1

        next_token = page.context.token
        if not page.has_more or not next_token:
            self._done = True
        elif self._stop_on_duplicate_token and next_token in self._seen:
            logger.warning(
                "duplicate_token",
                extra={"page_index": self._pages - 1, "query_filter": self._request.filter},
            )
            self._duplicate = True
            self._done = True

        self._ctx = page.context
        logger.debug(
            "page_fetched",
            extra={
                "page_index": self._pages - 1,
                "records": len(page.records),
                "has_more": not self._done,
            },
        )
        return page

    async def __aiter__(self) -> AsyncIterator[Page[T]]:
        while self.has_more_pages:
            yield await self.next_page()
