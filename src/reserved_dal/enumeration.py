"""Streaming enumeration over paginated remote results."""

import inspect
import logging
from enum import StrEnum
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel

from reserved_dal.errors import DalError, ErrorKind
from reserved_dal.models.params import MAX_PAGE_SIZE, PageRequest
from reserved_dal.pagination import Paginator, resolve_page_size
from reserved_dal.protocols import PageFetcher, RecordSink

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StopReason(StrEnum):
    """Why an enumeration ended without an error."""

    EXHAUSTED = "exhausted"
    """The fetcher reported no more pages."""

    CEILING = "ceiling"
    """The row ceiling was reached."""

    CANCELLED = "cancelled"
    """The sink asked to stop."""

    DUPLICATE_TOKEN = "duplicate_token"
    """The remote service handed back a continuation token already used."""


class EnumerationResult(BaseModel, frozen=True):
    """Summary of one finished enumeration."""

    pages_fetched: int
    records_emitted: int
    stop_reason: StopReason


class EnumerationDriver(Generic[T]):
    """Streams every record of a paginated listing to a sink.

    One driver instance holds no per-run state, so the same driver can
    serve several sequential or concurrent `run` calls.
    """

    __slots__: ClassVar[tuple[str, str, str]] = (
        "_fetcher",
        "_max_page_size",
        "_stop_on_duplicate_token",
    )

    _fetcher: PageFetcher[T]
    _max_page_size: int
    _stop_on_duplicate_token: bool

    def __init__(
        self,
        fetcher: PageFetcher[T],
        *,
        max_page_size: int = MAX_PAGE_SIZE,
        stop_on_duplicate_token: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._max_page_size = max_page_size
        self._stop_on_duplicate_token = stop_on_duplicate_token

    async def run(
        self,
        emit: RecordSink[T],
        *,
        filter: str | None = None,  # noqa: A002
        ceiling: int | None = None,
    ) -> EnumerationResult:
        """Fetch pages in order and hand each record to `emit`.

        Args:
            emit: Sink called once per record; returning False stops the run
            filter: Exact-match value passed through to every page fetch
            ceiling: Maximum number of records to emit (None = unbounded)

        Returns:
            EnumerationResult describing how the run ended

        Raises:
            DalError: If `ceiling` is negative.
            Exception: Whatever the fetcher or sink raised, unchanged.
                Records emitted before the failure stay emitted.
        """
        if ceiling is not None and ceiling < 0:
            msg = f"Row ceiling must be non-negative, got {ceiling}"
            raise DalError(msg, kind=ErrorKind.INVALID_INPUT)

        if ceiling == 0:
            return EnumerationResult(
                pages_fetched=0, records_emitted=0, stop_reason=StopReason.CEILING
            )

        request = PageRequest(
            filter=filter or None,
            page_size=resolve_page_size(ceiling, self._max_page_size),
        )
        paginator: Paginator[T] = Paginator(
            self._fetcher,
            request,
            stop_on_duplicate_token=self._stop_on_duplicate_token,
        )
        emitted = 0
        stop_reason: StopReason | None = None

        try:
            while stop_reason is None and paginator.has_more_pages:
                page = await paginator.next_page()
                for record in page.records:
                    should_continue = emit(record)
                    if inspect.isawaitable(should_continue):
                        should_continue = await should_continue
                    emitted += 1

                    # Consumer may have hit its own limit or been aborted
                    if should_continue is False:
                        stop_reason = StopReason.CANCELLED
                        break
                    if ceiling is not None and emitted >= ceiling:
                        stop_reason = StopReason.CEILING
                        break
        except Exception as e:
            logger.error(
                "enumeration_error",
                extra={
                    "query_filter": request.filter,
                    "pages_fetched": paginator.pages_fetched,
                    "records_emitted": emitted,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        if stop_reason is None:
            stop_reason = (
                StopReason.DUPLICATE_TOKEN
                if paginator.stopped_on_duplicate_token
                else StopReason.EXHAUSTED
            )

        result = EnumerationResult(
            pages_fetched=paginator.pages_fetched,
            records_emitted=emitted,
            stop_reason=stop_reason,
        )
        logger.info(
            "enumeration_complete",
            extra={
                "query_filter": request.filter,
                "page_size": request.page_size,
                "pages_fetched": result.pages_fetched,
                "records_emitted": result.records_emitted,
                "stop_reason": str(result.stop_reason),
            },
        )
        return result
