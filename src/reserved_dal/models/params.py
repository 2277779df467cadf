"""Parameter types for paginated requests.

Params define how much to read and how to scope a query,
while contexts carry runtime state (continuation tokens).
"""

from typing import Final

from pydantic import BaseModel, Field

MAX_PAGE_SIZE: Final = 100
"""Largest page the remote API accepts."""

MIN_PAGE_SIZE: Final = 20
"""Smallest page requested when a row ceiling narrows the page size."""


class PageRequest(BaseModel, frozen=True):
    """Immutable request shape shared by every page fetch of one operation."""

    filter: str | None = None
    """Exact-match value for the identifying attribute. None lists everything."""

    page_size: int | None = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    """Records requested per page. None leaves the size to the remote service."""

    @property
    def is_filtered(self) -> bool:
        """Whether the remote query is narrowed to one identifying value."""
        return self.filter is not None
