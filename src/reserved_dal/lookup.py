"""Point lookups by identifying value."""

import logging
from typing import ClassVar, Generic, TypeVar

from reserved_dal.models.contexts import PageContext
from reserved_dal.models.params import PageRequest
from reserved_dal.protocols import PageFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LookupResolver(Generic[T]):
    """Resolves one record with a single targeted fetch, bypassing pagination."""

    __slots__: ClassVar[tuple[str]] = ("_fetcher",)

    _fetcher: PageFetcher[T]

    def __init__(self, fetcher: PageFetcher[T]) -> None:
        self._fetcher = fetcher

    async def resolve(self, key: str | None) -> T | None:
        """Return the first record matching `key`, or None.

        An empty key returns None without contacting the remote service.
        Fetch errors propagate unchanged.
        """
        if not key:
            return None

        request = PageRequest(filter=key, page_size=None)
        try:
            page = await self._fetcher.fetch_page(request, PageContext())
        except Exception as e:
            logger.error(
                "lookup_error",
                extra={"key": key, "error_type": type(e).__name__, "error_message": str(e)},
            )
            raise

        if page.records:
            return page.records[0]
        return None
