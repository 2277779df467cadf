"""Core protocols for the paginated core and its providers."""

from collections.abc import Awaitable
from typing import Protocol, Self, TypeVar, runtime_checkable

from reserved_dal.models.contexts import PageContext
from reserved_dal.models.datatypes import Page
from reserved_dal.models.params import PageRequest

T_co = TypeVar("T_co", covariant=True)
T_contra = TypeVar("T_contra", contravariant=True)
Cred_contra = TypeVar("Cred_contra", contravariant=True)
Params_contra = TypeVar("Params_contra", contravariant=True)


@runtime_checkable
class PageFetcher(Protocol[T_co]):
    """Protocol for fetching one page of records from a remote source."""

    async def fetch_page(self, request: PageRequest, ctx: PageContext) -> Page[T_co]:
        """Perform one remote round trip.

        The returned page carries the context to pass on the next call.
        A page with `has_more=False` is terminal.
        """
        ...


@runtime_checkable
class RecordSink(Protocol[T_contra]):
    """Protocol for consumers of streamed records.

    The return value is the cooperative-continue signal: `False` asks the
    producer to stop before emitting anything else.
    """

    def __call__(self, record: T_contra, /) -> bool | Awaitable[bool]: ...


@runtime_checkable
class Provider(Protocol[Cred_contra, Params_contra]):
    """Protocol for provider lifecycle management."""

    @classmethod
    async def connect(cls, credentials: Cred_contra, params: Params_contra) -> Self:
        """Establish connection to the external service."""
        ...

    async def disconnect(self) -> None:
        """Release resources and close connections."""
        ...
